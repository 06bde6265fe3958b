"""Per-account persistence, toy authentication and JSON export/import."""
from __future__ import annotations

import hashlib
import hmac
import json
import os
import sqlite3
import tempfile
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from models.outfit import SavedOutfit, saved_outfit_from_dict
from models.planner import DailyContext, PlannerEvent, context_from_dict, event_from_dict
from models.style_profile import StyleProfile, profile_from_dict
from models.wardrobe_item import ClothingItem, InspirationImage, from_raw_metadata, inspiration_from_dict

EXPORT_VERSION = 1
_HASH_ITERATIONS = 200_000


class AccountExistsError(ValueError):
    """Raised when registering an email that already has an account."""


class AuthenticationError(ValueError):
    """Raised for a wrong email/password pair."""


class UnknownAccountError(KeyError):
    """Raised when no record exists for an email."""


class ImportFormatError(ValueError):
    """Raised when an export document cannot be read back."""


def normalize_email(email: str) -> str:
    normalized = (email or "").strip().lower()
    if "@" not in normalized:
        raise ValueError(f"Invalid email address: {email!r}")
    return normalized


def hash_password(password: str, salt: bytes | None = None) -> str:
    """Salted PBKDF2 digest; the clear password is never stored."""

    salt = salt or os.urandom(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, _HASH_ITERATIONS)
    return f"pbkdf2_sha256${_HASH_ITERATIONS}${salt.hex()}${digest.hex()}"


def verify_password(password: str, stored: str) -> bool:
    try:
        _, iterations, salt_hex, digest_hex = stored.split("$")
    except ValueError:
        return False
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), bytes.fromhex(salt_hex), int(iterations))
    return hmac.compare_digest(digest.hex(), digest_hex)


@dataclass
class AccountRecord:
    """Everything persisted for one user."""

    email: str
    name: str
    password_hash: str
    wardrobe: List[ClothingItem] = field(default_factory=list)
    inspiration: List[InspirationImage] = field(default_factory=list)
    profile: StyleProfile = field(default_factory=StyleProfile)
    context: DailyContext = field(default_factory=DailyContext)
    saved_outfits: List[SavedOutfit] = field(default_factory=list)
    calendar: List[PlannerEvent] = field(default_factory=list)
    calendar_token: Optional[str] = None
    last_active: float = field(default_factory=time.time)

    def state_dict(self) -> Dict[str, Any]:
        """The user's styling state, without credentials."""

        return {
            "wardrobe": [item.to_dict() for item in self.wardrobe],
            "inspiration": [image.to_dict() for image in self.inspiration],
            "profile": self.profile.to_dict(),
            "context": self.context.to_dict(),
            "saved_outfits": [outfit.to_dict() for outfit in self.saved_outfits],
            "calendar": [event.to_dict() for event in self.calendar],
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "email": self.email,
            "name": self.name,
            "password_hash": self.password_hash,
            "calendar_token": self.calendar_token,
            "last_active": self.last_active,
            **self.state_dict(),
        }

    def apply_state(self, data: Dict[str, Any]) -> None:
        """Replace the styling state from a stored or exported document."""

        self.wardrobe = [from_raw_metadata(item) for item in data.get("wardrobe", [])]
        self.inspiration = [inspiration_from_dict(image) for image in data.get("inspiration", [])]
        self.profile = profile_from_dict(data.get("profile"))
        self.context = context_from_dict(data.get("context"))
        self.saved_outfits = [saved_outfit_from_dict(outfit) for outfit in data.get("saved_outfits", [])]
        self.calendar = [event_from_dict(event) for event in data.get("calendar", [])]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AccountRecord":
        record = cls(
            email=data["email"],
            name=data.get("name", ""),
            password_hash=data["password_hash"],
            calendar_token=data.get("calendar_token"),
            last_active=float(data.get("last_active") or time.time()),
        )
        record.apply_state(data)
        return record


class AccountStore:
    """Persistence interface for account records."""

    def exists(self, email: str) -> bool:
        raise NotImplementedError

    def read(self, email: str) -> Dict[str, Any]:
        raise NotImplementedError

    def write(self, email: str, document: Dict[str, Any]) -> None:
        raise NotImplementedError

    def delete(self, email: str) -> bool:
        raise NotImplementedError


class JSONAccountStore(AccountStore):
    """One JSON file per account, named by a digest of the email."""

    def __init__(self, base_dir: str | Path = "data/accounts") -> None:
        self.base_dir = Path(base_dir)
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def _path(self, email: str) -> Path:
        return self.base_dir / f"{hashlib.sha256(email.encode('utf-8')).hexdigest()}.json"

    def exists(self, email: str) -> bool:
        return self._path(email).exists()

    def read(self, email: str) -> Dict[str, Any]:
        path = self._path(email)
        if not path.exists():
            raise UnknownAccountError(email)
        return json.loads(path.read_text())

    def write(self, email: str, document: Dict[str, Any]) -> None:
        path = self._path(email)
        with tempfile.NamedTemporaryFile("w", dir=self.base_dir, suffix=".tmp", delete=False) as tmp_file:
            json.dump(document, tmp_file, indent=2)
        Path(tmp_file.name).replace(path)

    def delete(self, email: str) -> bool:
        path = self._path(email)
        if not path.exists():
            return False
        path.unlink()
        return True


class SQLiteAccountStore(AccountStore):
    """SQLite-backed store keeping each account as one JSON document row."""

    def __init__(self, db_path: str | Path = "data/accounts.db") -> None:
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_schema()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _init_schema(self) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS accounts (
                    email TEXT PRIMARY KEY,
                    document TEXT NOT NULL,
                    updated_at REAL
                );
                """
            )

    def exists(self, email: str) -> bool:
        with self._connect() as conn:
            row = conn.execute("SELECT 1 FROM accounts WHERE email = ? LIMIT 1", (email,)).fetchone()
        return row is not None

    def read(self, email: str) -> Dict[str, Any]:
        with self._connect() as conn:
            row = conn.execute("SELECT document FROM accounts WHERE email = ?", (email,)).fetchone()
        if row is None:
            raise UnknownAccountError(email)
        return json.loads(row["document"])

    def write(self, email: str, document: Dict[str, Any]) -> None:
        with self._connect() as conn:
            conn.execute(
                "INSERT INTO accounts(email, document, updated_at) VALUES (?, ?, ?)\n"
                "ON CONFLICT(email) DO UPDATE SET document=excluded.document, updated_at=excluded.updated_at",
                (email, json.dumps(document), time.time()),
            )

    def delete(self, email: str) -> bool:
        with self._connect() as conn:
            cursor = conn.execute("DELETE FROM accounts WHERE email = ?", (email,))
            return cursor.rowcount > 0


_LIST_SECTIONS = ("wardrobe", "inspiration", "saved_outfits", "calendar")
_OBJECT_SECTIONS = ("profile", "context")


def _check_sections(document: Dict[str, Any]) -> None:
    """Reject backups whose sections have the wrong JSON shape."""

    for section in _LIST_SECTIONS:
        entries = document.get(section, [])
        if not isinstance(entries, list) or not all(isinstance(entry, dict) for entry in entries):
            raise ImportFormatError(f"Backup section '{section}' must be a list of objects")
    for section in _OBJECT_SECTIONS:
        value = document.get(section)
        if value is not None and not isinstance(value, dict):
            raise ImportFormatError(f"Backup section '{section}' must be an object")


class AccountManager:
    """Registration, login and record lifecycle over an :class:`AccountStore`."""

    def __init__(self, store: AccountStore, default_laundry_cycle_days: int = 7) -> None:
        self.store = store
        self.default_laundry_cycle_days = default_laundry_cycle_days

    def register(self, email: str, password: str, name: str = "") -> AccountRecord:
        email = normalize_email(email)
        if not password:
            raise ValueError("Password must not be empty")
        if self.store.exists(email):
            raise AccountExistsError(f"An account already exists for {email}")
        record = AccountRecord(
            email=email,
            name=name.strip() or email.split("@", 1)[0],
            password_hash=hash_password(password),
            profile=StyleProfile(laundry_cycle_days=self.default_laundry_cycle_days),
        )
        self.save(record)
        return record

    def authenticate(self, email: str, password: str) -> AccountRecord:
        try:
            record = self.load(email)
        except (UnknownAccountError, ValueError) as exc:
            raise AuthenticationError("Invalid email or password") from exc
        if not verify_password(password, record.password_hash):
            raise AuthenticationError("Invalid email or password")
        self.save(record)
        return record

    def load(self, email: str) -> AccountRecord:
        return AccountRecord.from_dict(self.store.read(normalize_email(email)))

    def save(self, record: AccountRecord) -> AccountRecord:
        record.last_active = time.time()
        self.store.write(record.email, record.to_dict())
        return record

    def delete(self, email: str) -> bool:
        return self.store.delete(normalize_email(email))

    def export_account(self, email: str) -> Dict[str, Any]:
        """Backup document for one account; credentials are left out."""

        record = self.load(email)
        return {
            "version": EXPORT_VERSION,
            "exported_at": time.time(),
            "email": record.email,
            "name": record.name,
            **record.state_dict(),
        }

    def import_account(self, email: str, document: Dict[str, Any]) -> AccountRecord:
        """Replace the account's styling state with an exported document."""

        if not isinstance(document, dict):
            raise ImportFormatError("Backup must be a JSON object")
        version = document.get("version", EXPORT_VERSION)
        if version != EXPORT_VERSION:
            raise ImportFormatError(f"Unsupported backup version {version}")
        _check_sections(document)
        record = self.load(email)
        try:
            record.apply_state(document)
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            raise ImportFormatError(f"Backup is malformed: {exc}") from exc
        if document.get("name"):
            record.name = str(document["name"])
        return self.save(record)


__all__ = [
    "AccountRecord",
    "AccountStore",
    "JSONAccountStore",
    "SQLiteAccountStore",
    "AccountManager",
    "AccountExistsError",
    "AuthenticationError",
    "UnknownAccountError",
    "ImportFormatError",
    "hash_password",
    "verify_password",
    "normalize_email",
]
