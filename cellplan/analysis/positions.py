"""Body-carry position labels, colours and icons."""

from __future__ import annotations

from typing import Any, Dict, List

BODY_POSITIONS: List[str] = [
    "Hand",
    "Hips",
    "Torso",
    "Bag",
    "Pocket",
    "Backpack",
    "Arm",
    "Leg",
    "Head",
    "Other",
]

# Display order used by the charts; unknown labels go last.
POSITION_ORDER: List[str] = [
    "Hand",
    "Bag",
    "Hips",
    "Torso",
    "Pocket",
    "Backpack",
    "Arm",
    "Leg",
    "Head",
    "Other",
]

POSITION_COLORS: Dict[str, str] = {
    "Hand": "#3b82f6",
    "Hips": "#10b981",
    "Torso": "#f59e0b",
    "Bag": "#ef4444",
    "Pocket": "#8b5cf6",
    "Backpack": "#ec4899",
    "Arm": "#06b6d4",
    "Leg": "#84cc16",
    "Head": "#f97316",
    "Other": "#6b7280",
}

POSITION_ICONS: Dict[str, str] = {
    "Hand": "✋",
    "Hips": "👖",
    "Torso": "👕",
    "Bag": "🎒",
    "Pocket": "👔",
    "Backpack": "🎒",
    "Arm": "💪",
    "Leg": "🦵",
    "Head": "👤",
    "Other": "📍",
}

_EXACT = {
    "hand": "Hand",
    "bag": "Bag",
    "hips": "Hips",
    "hip": "Hips",
    "torso": "Torso",
    "pocket": "Pocket",
    "backpack": "Backpack",
    "arm": "Arm",
    "leg": "Leg",
    "head": "Head",
}

_PARTIAL = [
    ("hand", "Hand"),
    ("bag", "Bag"),
    ("hip", "Hips"),
    ("torso", "Torso"),
    ("pocket", "Pocket"),
    ("backpack", "Backpack"),
    ("arm", "Arm"),
    ("leg", "Leg"),
    ("head", "Head"),
]


def normalize_position(position: Any) -> str:
    """Map a free-form body position label onto a canonical name.

    Exact (case-insensitive) names win, then the first substring hit in a
    fixed order; anything else is returned capitalized.
    """

    if not isinstance(position, str) or not position.strip():
        return "Other"
    normalized = position.strip()
    lower = normalized.lower()

    if lower in _EXACT:
        return _EXACT[lower]
    for needle, name in _PARTIAL:
        if needle in lower:
            return name
    return normalized[0].upper() + normalized[1:].lower()


def position_color(position: Any) -> str:
    return POSITION_COLORS.get(normalize_position(position), POSITION_COLORS["Other"])


def position_icon(position: Any) -> str:
    return POSITION_ICONS.get(normalize_position(position), POSITION_ICONS["Other"])


def position_rank(position: str) -> int:
    if position in POSITION_ORDER:
        return POSITION_ORDER.index(position)
    return 999
