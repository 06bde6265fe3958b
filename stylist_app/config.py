"""Configuration helpers for the wardrobe stylist app."""

from dataclasses import dataclass
from pathlib import Path
import os
from typing import Optional

DEFAULT_GEMINI_MODEL = "models/gemini-2.0-flash"
DEFAULT_LAUNDRY_CYCLE_DAYS = 7
DEFAULT_GEOCODE_URL = "https://api.bigdatacloud.net/data/reverse-geocode-client"


def _as_bool(value: Optional[str], default: bool) -> bool:
    if value is None or value == "":
        return default
    return str(value).strip().lower() in {"1", "true", "yes", "on"}


@dataclass
class StylistConfig:
    """Configuration values for the stylist app.

    Every Gemini-backed agent reads its model name, API key and request timeout
    from here; the stores read their backend and location.
    """

    model: str = DEFAULT_GEMINI_MODEL
    api_key: Optional[str] = None
    request_timeout_seconds: float = 60.0
    search_grounding: bool = True
    enforce_laundry_filter: bool = False
    default_laundry_cycle_days: int = DEFAULT_LAUNDRY_CYCLE_DAYS
    account_store_backend: str = "json"
    account_store_path: Optional[str] = None
    google_credentials_path: Optional[str] = None
    calendar_id: Optional[str] = None
    geocode_url: str = DEFAULT_GEOCODE_URL
    environment: str | None = None

    @classmethod
    def from_env(cls) -> "StylistConfig":
        """Build a config from environment variables or an environment YAML file.

        Environment specific YAML lives in ``config/environments/<env>.yaml`` by
        default and is merged with environment variables so that the Gemini key
        never has to be written to disk.
        """

        env_name = os.getenv("APP_ENV")
        config_path = os.getenv("APP_CONFIG_PATH")
        config_dir = Path(os.getenv("STYLIST_CONFIG_DIR", "config/environments"))
        yaml_config: dict = {}

        if config_path:
            path = Path(config_path)
        elif env_name:
            path = config_dir / f"{env_name}.yaml"
        else:
            path = None

        if path and path.exists():
            yaml_config = cls._load_yaml_config(path)

        def get_value(key: str, default: Optional[str] = None) -> Optional[str]:
            env_key = key.upper()
            return os.getenv(env_key, yaml_config.get(key, default))

        api_key = get_value("gemini_api_key") or get_value("google_api_key")
        timeout = get_value("request_timeout_seconds", "60")
        cycle = get_value("default_laundry_cycle_days", str(DEFAULT_LAUNDRY_CYCLE_DAYS))

        return cls(
            model=str(get_value("model", DEFAULT_GEMINI_MODEL) or DEFAULT_GEMINI_MODEL),
            api_key=api_key,
            request_timeout_seconds=float(timeout or 60),
            search_grounding=_as_bool(get_value("search_grounding"), True),
            enforce_laundry_filter=_as_bool(get_value("enforce_laundry_filter"), False),
            default_laundry_cycle_days=int(cycle or DEFAULT_LAUNDRY_CYCLE_DAYS),
            account_store_backend=str(get_value("account_store_backend", "json") or "json"),
            account_store_path=get_value("account_store_path"),
            google_credentials_path=get_value("google_credentials_path"),
            calendar_id=get_value("calendar_id"),
            geocode_url=str(get_value("geocode_url", DEFAULT_GEOCODE_URL) or DEFAULT_GEOCODE_URL),
            environment=env_name,
        )

    @staticmethod
    def _load_yaml_config(path: Path) -> dict:
        """Parse flat ``key: value`` lines; nested YAML is not supported."""

        config: dict[str, str] = {}
        for line in path.read_text().splitlines():
            stripped = line.strip()
            if not stripped or stripped.startswith("#") or ":" not in stripped:
                continue
            key, raw_value = stripped.split(":", 1)
            value = raw_value.strip()
            if len(value) >= 2 and value[0] == value[-1] and value[0] in {"'", '"'}:
                value = value[1:-1]
            config[key.strip()] = value
        return config


__all__ = ["StylistConfig", "DEFAULT_GEMINI_MODEL", "DEFAULT_LAUNDRY_CYCLE_DAYS"]
