"""Positional Pokemon references ("p2a: Garchomp") used by battle records."""

import re
from dataclasses import dataclass
from typing import Optional

_REF_RE = re.compile(r"^([a-z0-9]+):\s*(.+)$", re.IGNORECASE)


def side_of(ref: str) -> str:
    """Return the side ("p1" or "p2") owning a reference key."""
    return "p2" if ref.startswith("p2") else "p1"


@dataclass(frozen=True)
class PokemonRef:
    """Resolved battler reference.

    Attributes:
        ref: Identity key (side + active slot, e.g. "p1a")
        side: Owning side, "p1" or "p2"
        nickname: Display nickname, if the token carried one
    """

    ref: str
    side: str
    nickname: Optional[str] = None


def parse_pokemon_ref(token: str) -> PokemonRef:
    """Parse a "<ref>: <nickname>" token.

    Tokens that do not match the pattern are kept whole as the reference,
    so callers always get a ref and a side back.

    Examples:
        >>> parse_pokemon_ref("p2a: Squirtle")
        PokemonRef(ref='p2a', side='p2', nickname='Squirtle')
        >>> parse_pokemon_ref("Pikachu")
        PokemonRef(ref='Pikachu', side='p1', nickname='Pikachu')
    """
    match = _REF_RE.match(token.strip())
    if not match:
        ref = token.strip()
        return PokemonRef(ref=ref, side=side_of(ref), nickname=ref or None)
    ref, nickname = match.group(1), match.group(2).strip()
    return PokemonRef(ref=ref, side=side_of(ref), nickname=nickname or None)
