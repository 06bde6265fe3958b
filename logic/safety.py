"""Guardrails shared by every Gemini instruction."""

from __future__ import annotations

from typing import List

GUARDRAIL_BULLETS: List[str] = [
    "Stay within personal styling: wardrobe, outfits, proportions and trends.",
    "Only reference garments that appear in the provided wardrobe images.",
    "Never comment on weight, health or attractiveness; describe proportions neutrally.",
    "Treat inspiration images as mood references, never as items the user owns.",
    "Return JSON that matches the declared schema and nothing else.",
]


def system_instruction(role_hint: str) -> str:
    """Compose a consistent system prompt with boundary reminders."""

    boundary_text = "\n".join(f"- {bullet}" for bullet in GUARDRAIL_BULLETS)
    return (
        f"You are The Lady's Personal Stylist, acting as {role_hint}.\n"
        "Follow these guardrails before responding:\n"
        f"{boundary_text}"
    )


__all__ = ["system_instruction", "GUARDRAIL_BULLETS"]
