"""Text normalizers shared by the event dispatcher and the renderers."""

import re
from dataclasses import dataclass
from typing import Iterable, List, Optional

from recap.game.schema.enums import FieldEffect, SideCondition, Terrain, Weather

# Annotations that only steer the client animation and carry no fact.
PRESENTATION_ONLY_TAGS = frozenset({"still", "silent", "anim", "upkeep", "notarget"})

_BRACKET_RE = re.compile(r"^\[(.+?)\]\s*(.*)$")
_EFFECT_PREFIX_RE = re.compile(r"^(ability|item|move):\s*", re.IGNORECASE)


@dataclass(frozen=True)
class HpStatus:
    """HP/status token as it appears in switch and damage records.

    Attributes:
        raw: Original token (e.g., "48/100 psn", "0 fnt")
        hp_percent: Remaining HP as a percentage of max, if the token had one
        status: Status code without the faint marker (e.g., "psn")
        fainted: Whether the token marks the Pokemon as fainted
    """

    raw: str
    hp_percent: Optional[int] = None
    status: Optional[str] = None
    fainted: bool = False


def _to_percent(current: int, maximum: int) -> int:
    if maximum <= 0:
        return 0
    percent = current * 100 / maximum
    if 0 < percent < 1:
        return 1
    return int(percent + 0.5)


def parse_hp_status(raw: str) -> HpStatus:
    """Parse an HP/status token.

    Examples:
        >>> parse_hp_status("48/100 psn")
        HpStatus(raw='48/100 psn', hp_percent=48, status='psn', fainted=False)
        >>> parse_hp_status("0 fnt").fainted
        True
    """
    tokens = raw.split()
    if not tokens:
        return HpStatus(raw=raw)

    hp_token = tokens[0]
    extra = tokens[1:]
    fainted = "fnt" in extra or (hp_token == "0" and not extra)
    status_tokens = [token for token in extra if token != "fnt"]
    status = " ".join(status_tokens) if status_tokens else None

    hp_percent: Optional[int] = None
    if "/" in hp_token:
        current, _, maximum = hp_token.partition("/")
        if current.isdigit() and maximum.isdigit():
            hp_percent = _to_percent(int(current), int(maximum))
    elif hp_token == "0":
        hp_percent = 0

    return HpStatus(raw=raw, hp_percent=hp_percent, status=status, fainted=fainted)


def format_hp_status(value: HpStatus) -> str:
    """Render an HpStatus for display: "48% PSN", "KO", or the raw token."""
    if value.fainted:
        return "KO"
    parts: List[str] = []
    if value.hp_percent is not None:
        parts.append(f"{value.hp_percent}%")
    if value.status:
        parts.append(value.status.upper())
    return " ".join(parts) or value.raw.strip()


def prettify_move(move: str) -> str:
    """Capitalize the first letter of every word of a move name."""
    return " ".join(chunk[:1].upper() + chunk[1:] for chunk in move.split(" "))


def strip_effect_prefix(effect: str) -> str:
    """Drop a leading "ability:", "item:" or "move:" qualifier."""
    return _EFFECT_PREFIX_RE.sub("", effect.strip())


def effect_source_kind(effect: str) -> Optional[str]:
    """Return "ability", "item" or "move" when the effect carries that qualifier."""
    match = _EFFECT_PREFIX_RE.match(effect.strip())
    return match.group(1).lower() if match else None


def simplify_bracket_text(segment: str) -> str:
    """Translate one trailing protocol annotation into display text.

    "[from] ability: Intimidate" -> "from Intimidate", "[of] p1a: X" -> "",
    "[sid] 2" -> "side 2", "[wisher] Clefable" -> "Wish from Clefable".
    Text without a bracket tag is returned stripped.
    """
    if not segment:
        return ""
    match = _BRACKET_RE.match(segment)
    if not match:
        return segment.strip()
    tag, rest = match.group(1), match.group(2).strip()
    if tag == "from":
        return f"from {strip_effect_prefix(rest)}".strip() if rest else ""
    if tag == "of":
        return ""
    if tag in ("msg", "move"):
        return rest
    if tag == "sid":
        return f"side {rest}" if rest else ""
    if tag == "wisher":
        return f"Wish from {rest}" if rest else "Wish"
    if tag == "spread":
        return "spread"
    return rest or tag


def annotation_tag(segment: str) -> Optional[str]:
    """Return the bracket tag of an annotation ("from" for "[from] X")."""
    match = _BRACKET_RE.match(segment)
    return match.group(1) if match else None


def annotation_value(segments: Iterable[str], tag: str) -> Optional[str]:
    """Return the text following the first annotation with the given tag."""
    for segment in segments:
        match = _BRACKET_RE.match(segment)
        if match and match.group(1) == tag:
            return match.group(2).strip()
    return None


def simplify_annotations(segments: Iterable[str]) -> List[str]:
    """Translate a run of annotations, dropping empty and presentation-only ones."""
    simplified = []
    for segment in segments:
        if annotation_tag(segment) in PRESENTATION_ONLY_TAGS:
            continue
        text = simplify_bracket_text(segment)
        if text:
            simplified.append(text)
    return simplified


def with_extras(body: str, extras: List[str]) -> str:
    """Append translated annotations in parentheses: "BRN (from Flame Orb)"."""
    if not extras:
        return body
    return f"{body} ({'; '.join(extras)})"


def possessive(name: str) -> str:
    """Possessive form of a display name: "Garchomp's", "Landorus'"."""
    if name.endswith("s"):
        return f"{name}'"
    return f"{name}'s"


def field_display_name(effect: str) -> str:
    """Map a weather, terrain or room identifier to its display name.

    Unknown identifiers fall back to the effect text without its qualifier.

    Examples:
        >>> field_display_name("RainDance")
        'Rain'
        >>> field_display_name("move: Electric Terrain")
        'Electric Terrain'
    """
    for table in (Weather, Terrain, FieldEffect):
        try:
            return table.from_protocol(effect).display_name
        except ValueError:
            continue
    return strip_effect_prefix(effect)


def side_condition_display_name(condition: str) -> str:
    """Map a side condition identifier ("move: Stealth Rock") to its display name."""
    try:
        return SideCondition.from_protocol(condition).display_name
    except ValueError:
        return strip_effect_prefix(condition)
