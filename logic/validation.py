"""Gemini response schemas and the Pydantic models that parse them."""

from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from models.taxonomy import CATEGORIES, CLASSIFICATIONS, FITS, OUTFIT_TYPES, validate_fit

OUTFIT_FIELDS = [
    "title",
    "description",
    "fashionGuideline",
    "trendFactor",
    "identityMatch",
    "proportionNote",
    "type",
    "items",
]

OUTFITS_RESPONSE_SCHEMA: Dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "outfits": {
            "type": "ARRAY",
            "min_items": len(OUTFIT_TYPES),
            "max_items": len(OUTFIT_TYPES),
            "items": {
                "type": "OBJECT",
                "properties": {
                    "title": {"type": "STRING"},
                    "description": {"type": "STRING"},
                    "fashionGuideline": {"type": "STRING"},
                    "trendFactor": {"type": "STRING"},
                    "identityMatch": {"type": "STRING"},
                    "proportionNote": {"type": "STRING"},
                    "type": {"type": "STRING", "format": "enum", "enum": list(OUTFIT_TYPES)},
                    "items": {"type": "ARRAY", "items": {"type": "STRING"}},
                },
                "required": list(OUTFIT_FIELDS),
            },
        }
    },
    "required": ["outfits"],
}

CLASSIFICATION_RESPONSE_SCHEMA: Dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "category": {"type": "STRING", "format": "enum", "enum": list(CATEGORIES)},
        "name": {"type": "STRING"},
        "color": {"type": "STRING"},
        "fit": {"type": "STRING", "format": "enum", "enum": list(FITS)},
        "classification": {"type": "STRING", "format": "enum", "enum": list(CLASSIFICATIONS)},
        "style": {"type": "STRING"},
        "material": {"type": "STRING"},
    },
    "required": ["category", "name", "color", "classification"],
}

BODY_ANALYSIS_RESPONSE_SCHEMA: Dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "bodyShape": {"type": "STRING"},
        "proportions": {"type": "STRING"},
        "suggestedFocus": {"type": "STRING"},
        "heightEstimate": {"type": "STRING"},
    },
    "required": ["bodyShape", "proportions", "suggestedFocus", "heightEstimate"],
}


class OutfitPayload(BaseModel):
    """One outfit exactly as the model returns it."""

    model_config = ConfigDict(populate_by_name=True)

    title: str
    description: str
    fashion_guideline: str = Field(alias="fashionGuideline")
    trend_factor: str = Field(alias="trendFactor")
    identity_match: str = Field(alias="identityMatch")
    proportion_note: str = Field(alias="proportionNote")
    outfit_type: Literal["Classic", "Practical", "Bold"] = Field(alias="type")
    items: List[str]


class OutfitsPayload(BaseModel):
    """Exactly one Classic, one Practical and one Bold outfit."""

    outfits: List[OutfitPayload] = Field(min_length=len(OUTFIT_TYPES), max_length=len(OUTFIT_TYPES))

    @field_validator("outfits")
    @classmethod
    def _one_of_each_type(cls, outfits: List[OutfitPayload]) -> List[OutfitPayload]:
        types = sorted(outfit.outfit_type for outfit in outfits)
        if types != sorted(OUTFIT_TYPES):
            raise ValueError(f"Expected one outfit of each type {OUTFIT_TYPES}, got {types}")
        return outfits


class ClassificationPayload(BaseModel):
    category: Literal["Tops", "Bottoms", "Dresses", "Outerwear", "Shoes", "Accessories"]
    name: str
    color: Optional[str] = None
    fit: Optional[str] = None
    classification: Literal["Basic", "Statement"]
    style: Optional[str] = None
    material: Optional[str] = None

    @field_validator("fit")
    @classmethod
    def _known_fit(cls, fit: Optional[str]) -> Optional[str]:
        """An unrecognised fit guess is dropped rather than failing the whole classification."""

        if fit is None:
            return None
        try:
            return validate_fit(fit)
        except ValueError:
            return None


FALLBACK_CLASSIFICATION = ClassificationPayload(name="New Item", category="Tops", classification="Basic")


class BodyAnalysisPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    body_shape: str = Field(alias="bodyShape", min_length=1)
    proportions: str = Field(min_length=1)
    suggested_focus: str = Field(alias="suggestedFocus", min_length=1)
    height_estimate: str = Field(alias="heightEstimate", min_length=1)


__all__ = [
    "OUTFITS_RESPONSE_SCHEMA",
    "CLASSIFICATION_RESPONSE_SCHEMA",
    "BODY_ANALYSIS_RESPONSE_SCHEMA",
    "OutfitPayload",
    "OutfitsPayload",
    "ClassificationPayload",
    "FALLBACK_CLASSIFICATION",
    "BodyAnalysisPayload",
]
