"""Persistent style preferences and body-architecture analysis."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

DEFAULT_LAUNDRY_CYCLE_DAYS = 7


@dataclass
class BodyAnalysis:
    """AI-derived proportions read from one full-length photo."""

    body_shape: str
    proportions: str
    suggested_focus: str
    height_estimate: str


@dataclass
class StyleProfile:
    aesthetic: str = ""
    silhouettes: str = ""
    forbidden: str = ""
    signature_colors: str = ""
    body_type: Optional[str] = None
    height: Optional[str] = None
    ai_analysis: Optional[BodyAnalysis] = None
    analysis_photo: Optional[str] = None
    pinterest_profile: Optional[str] = None
    laundry_cycle_days: int = DEFAULT_LAUNDRY_CYCLE_DAYS

    def __post_init__(self) -> None:
        if isinstance(self.ai_analysis, dict):
            self.ai_analysis = BodyAnalysis(**self.ai_analysis)
        elif self.ai_analysis is not None and not isinstance(self.ai_analysis, BodyAnalysis):
            raise TypeError("ai_analysis must be a BodyAnalysis or a mapping")
        self.laundry_cycle_days = int(self.laundry_cycle_days)
        if self.laundry_cycle_days < 1:
            raise ValueError("laundry_cycle_days must be at least 1")

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def apply_analysis(self, analysis: BodyAnalysis, photo: str | None = None) -> None:
        """Store an analysis and mirror its shape and height into the editable fields."""

        self.ai_analysis = analysis
        self.analysis_photo = photo
        self.body_type = analysis.body_shape
        self.height = analysis.height_estimate


_PROFILE_FIELDS = set(StyleProfile.__dataclass_fields__)


def profile_from_dict(data: Dict[str, Any] | None) -> StyleProfile:
    """Build a profile, ignoring unknown keys from older exports."""

    data = data or {}
    return StyleProfile(**{key: value for key, value in data.items() if key in _PROFILE_FIELDS})


__all__ = ["BodyAnalysis", "StyleProfile", "profile_from_dict", "DEFAULT_LAUNDRY_CYCLE_DAYS"]
