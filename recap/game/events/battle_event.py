"""Typed battle log records.

Every recognised tag has one frozen dataclass with a parse_raw_message()
classmethod. Records may arrive with or without the leading "|", and
trailing fields are kept verbatim in `annotations` ("[from] item: Leftovers").
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import ClassVar, List, Optional, Tuple

from recap.game.schema.pokemon_ref import PokemonRef, parse_pokemon_ref


def split_record(raw_message: str) -> List[str]:
    """Split a record into [tag, field1, field2, ...]."""
    parts = raw_message.split("|")
    if parts and parts[0] == "":
        parts = parts[1:]
    return parts


def _fields(raw_message: str) -> List[str]:
    return split_record(raw_message)[1:]


def _field(fields: List[str], index: int) -> str:
    return fields[index] if len(fields) > index else ""


def _annotations(fields: List[str], start: int) -> Tuple[str, ...]:
    return tuple(part for part in fields[start:] if part)


def _optional_ref(token: str) -> Optional[PokemonRef]:
    if not token or token.startswith("["):
        return None
    return parse_pokemon_ref(token)


class BattleEvent(ABC):
    @classmethod
    @abstractmethod
    def parse_raw_message(cls, raw_message: str) -> "BattleEvent":
        pass


@dataclass(frozen=True)
class TurnEvent(BattleEvent):
    raw_message: str
    turn_number: int

    @classmethod
    def parse_raw_message(cls, raw_message: str) -> "TurnEvent":
        fields = _fields(raw_message)
        return cls(raw_message=raw_message, turn_number=int(fields[0]))


@dataclass(frozen=True)
class PlayerEvent(BattleEvent):
    raw_message: str
    player_id: str
    username: str

    @classmethod
    def parse_raw_message(cls, raw_message: str) -> "PlayerEvent":
        fields = _fields(raw_message)
        return cls(
            raw_message=raw_message,
            player_id=fields[0],
            username=_field(fields, 1),
        )


@dataclass(frozen=True)
class GenEvent(BattleEvent):
    raw_message: str
    generation: str

    @classmethod
    def parse_raw_message(cls, raw_message: str) -> "GenEvent":
        return cls(raw_message=raw_message, generation=_field(_fields(raw_message), 0))


@dataclass(frozen=True)
class TierEvent(BattleEvent):
    """Format name record ("tier", or "format" in older logs)."""

    raw_message: str
    tier: str

    @classmethod
    def parse_raw_message(cls, raw_message: str) -> "TierEvent":
        return cls(raw_message=raw_message, tier=_field(_fields(raw_message), 0))


@dataclass(frozen=True)
class BattleEndEvent(BattleEvent):
    raw_message: str
    winner: str

    @classmethod
    def parse_raw_message(cls, raw_message: str) -> "BattleEndEvent":
        return cls(raw_message=raw_message, winner=_field(_fields(raw_message), 0))


@dataclass(frozen=True)
class LeaveEvent(BattleEvent):
    """A user leaving the room ("l"); the loser's record at the end of a battle.

    The username may carry a rank symbol prefix ("☆Misty").
    """

    raw_message: str
    username: str

    @classmethod
    def parse_raw_message(cls, raw_message: str) -> "LeaveEvent":
        return cls(raw_message=raw_message, username=_field(_fields(raw_message), 0))


@dataclass(frozen=True)
class PokeEvent(BattleEvent):
    """Team preview entry."""

    raw_message: str
    player_id: str
    species: str

    @classmethod
    def parse_raw_message(cls, raw_message: str) -> "PokeEvent":
        fields = _fields(raw_message)
        return cls(
            raw_message=raw_message,
            player_id=fields[0],
            species=fields[1].split(",")[0].strip(),
        )


@dataclass(frozen=True)
class SwitchEvent(BattleEvent):
    raw_message: str
    pokemon: PokemonRef
    species: str
    hp_status: str
    annotations: Tuple[str, ...] = ()

    @classmethod
    def parse_raw_message(cls, raw_message: str) -> "SwitchEvent":
        fields = _fields(raw_message)
        return cls(
            raw_message=raw_message,
            pokemon=parse_pokemon_ref(fields[0]),
            species=_field(fields, 1).split(",")[0].strip(),
            hp_status=_field(fields, 2),
            annotations=_annotations(fields, 3),
        )


@dataclass(frozen=True)
class DragEvent(SwitchEvent):
    """Switch forced by the opponent (Roar, Whirlwind, Dragon Tail)."""


@dataclass(frozen=True)
class ReplaceEvent(SwitchEvent):
    """Illusion reveal; carries the real species of the active Pokemon."""


@dataclass(frozen=True)
class MoveEvent(BattleEvent):
    raw_message: str
    pokemon: PokemonRef
    move_name: str
    target: Optional[PokemonRef] = None
    annotations: Tuple[str, ...] = ()

    @classmethod
    def parse_raw_message(cls, raw_message: str) -> "MoveEvent":
        fields = _fields(raw_message)
        target = _optional_ref(_field(fields, 2))
        return cls(
            raw_message=raw_message,
            pokemon=parse_pokemon_ref(fields[0]),
            move_name=fields[1],
            target=target,
            annotations=_annotations(fields, 3 if target else 2),
        )


@dataclass(frozen=True)
class CantEvent(BattleEvent):
    raw_message: str
    pokemon: PokemonRef
    reason: str
    move_name: Optional[str] = None

    @classmethod
    def parse_raw_message(cls, raw_message: str) -> "CantEvent":
        fields = _fields(raw_message)
        move_name = _field(fields, 2)
        return cls(
            raw_message=raw_message,
            pokemon=parse_pokemon_ref(fields[0]),
            reason=_field(fields, 1),
            move_name=move_name if move_name and not move_name.startswith("[") else None,
        )


@dataclass(frozen=True)
class DamageEvent(BattleEvent):
    raw_message: str
    pokemon: PokemonRef
    hp_status: str
    annotations: Tuple[str, ...] = ()

    @classmethod
    def parse_raw_message(cls, raw_message: str) -> "DamageEvent":
        fields = _fields(raw_message)
        return cls(
            raw_message=raw_message,
            pokemon=parse_pokemon_ref(fields[0]),
            hp_status=_field(fields, 1),
            annotations=_annotations(fields, 2),
        )


@dataclass(frozen=True)
class HealEvent(DamageEvent):
    pass


@dataclass(frozen=True)
class SetHpEvent(DamageEvent):
    pass


@dataclass(frozen=True)
class FaintEvent(BattleEvent):
    raw_message: str
    pokemon: PokemonRef

    @classmethod
    def parse_raw_message(cls, raw_message: str) -> "FaintEvent":
        return cls(raw_message=raw_message, pokemon=parse_pokemon_ref(_fields(raw_message)[0]))


@dataclass(frozen=True)
class BoostEvent(BattleEvent):
    SIGN: ClassVar[str] = "+"

    raw_message: str
    pokemon: PokemonRef
    stat: str
    amount: int
    annotations: Tuple[str, ...] = ()

    @classmethod
    def parse_raw_message(cls, raw_message: str) -> "BoostEvent":
        fields = _fields(raw_message)
        return cls(
            raw_message=raw_message,
            pokemon=parse_pokemon_ref(fields[0]),
            stat=fields[1],
            amount=int(fields[2]),
            annotations=_annotations(fields, 3),
        )

    @property
    def delta_text(self) -> str:
        """Signed stage change for display: "+1 ATK", "-2 SPE"."""
        return f"{self.SIGN}{self.amount} {self.stat.upper()}"


@dataclass(frozen=True)
class UnboostEvent(BoostEvent):
    SIGN: ClassVar[str] = "-"


@dataclass(frozen=True)
class StatusEvent(BattleEvent):
    raw_message: str
    pokemon: PokemonRef
    status: str
    annotations: Tuple[str, ...] = ()

    @classmethod
    def parse_raw_message(cls, raw_message: str) -> "StatusEvent":
        fields = _fields(raw_message)
        return cls(
            raw_message=raw_message,
            pokemon=parse_pokemon_ref(fields[0]),
            status=_field(fields, 1),
            annotations=_annotations(fields, 2),
        )


@dataclass(frozen=True)
class CureStatusEvent(StatusEvent):
    pass


@dataclass(frozen=True)
class AbilityEvent(BattleEvent):
    raw_message: str
    pokemon: PokemonRef
    ability: str
    annotations: Tuple[str, ...] = ()

    @classmethod
    def parse_raw_message(cls, raw_message: str) -> "AbilityEvent":
        fields = _fields(raw_message)
        return cls(
            raw_message=raw_message,
            pokemon=parse_pokemon_ref(fields[0]),
            ability=_field(fields, 1),
            annotations=_annotations(fields, 2),
        )

    @property
    def grants_boost(self) -> bool:
        """Whether stat changes follow (Intimidate, Intrepid Sword: "|boost")."""
        return "boost" in self.annotations


@dataclass(frozen=True)
class ItemEvent(BattleEvent):
    raw_message: str
    pokemon: PokemonRef
    item: str
    annotations: Tuple[str, ...] = ()

    @classmethod
    def parse_raw_message(cls, raw_message: str) -> "ItemEvent":
        fields = _fields(raw_message)
        return cls(
            raw_message=raw_message,
            pokemon=parse_pokemon_ref(fields[0]),
            item=_field(fields, 1),
            annotations=_annotations(fields, 2),
        )


@dataclass(frozen=True)
class EndItemEvent(ItemEvent):
    pass


@dataclass(frozen=True)
class StartVolatileEvent(BattleEvent):
    raw_message: str
    pokemon: PokemonRef
    effect: str
    annotations: Tuple[str, ...] = ()

    @classmethod
    def parse_raw_message(cls, raw_message: str) -> "StartVolatileEvent":
        fields = _fields(raw_message)
        return cls(
            raw_message=raw_message,
            pokemon=parse_pokemon_ref(fields[0]),
            effect=_field(fields, 1),
            annotations=_annotations(fields, 2),
        )


@dataclass(frozen=True)
class EndVolatileEvent(StartVolatileEvent):
    pass


@dataclass(frozen=True)
class SingleTurnEvent(StartVolatileEvent):
    """Effect lasting for the rest of the turn (Protect, Helping Hand)."""


@dataclass(frozen=True)
class ActivateEvent(StartVolatileEvent):
    pass


@dataclass(frozen=True)
class ImmuneEvent(BattleEvent):
    raw_message: str
    pokemon: PokemonRef
    annotations: Tuple[str, ...] = ()

    @classmethod
    def parse_raw_message(cls, raw_message: str) -> "ImmuneEvent":
        fields = _fields(raw_message)
        return cls(
            raw_message=raw_message,
            pokemon=parse_pokemon_ref(fields[0]),
            annotations=_annotations(fields, 1),
        )


@dataclass(frozen=True)
class FailEvent(ImmuneEvent):
    pass


@dataclass(frozen=True)
class MissEvent(BattleEvent):
    raw_message: str
    pokemon: PokemonRef
    target: Optional[PokemonRef] = None

    @classmethod
    def parse_raw_message(cls, raw_message: str) -> "MissEvent":
        fields = _fields(raw_message)
        return cls(
            raw_message=raw_message,
            pokemon=parse_pokemon_ref(fields[0]),
            target=_optional_ref(_field(fields, 1)),
        )


@dataclass(frozen=True)
class WeatherEvent(BattleEvent):
    raw_message: str
    weather: str
    annotations: Tuple[str, ...] = ()

    @classmethod
    def parse_raw_message(cls, raw_message: str) -> "WeatherEvent":
        fields = _fields(raw_message)
        return cls(
            raw_message=raw_message,
            weather=fields[0],
            annotations=_annotations(fields, 1),
        )

    @property
    def is_upkeep(self) -> bool:
        return "[upkeep]" in self.annotations

    @property
    def is_clear(self) -> bool:
        return self.weather.lower() == "none"


@dataclass(frozen=True)
class FieldStartEvent(BattleEvent):
    raw_message: str
    effect: str
    annotations: Tuple[str, ...] = ()

    @classmethod
    def parse_raw_message(cls, raw_message: str) -> "FieldStartEvent":
        fields = _fields(raw_message)
        return cls(
            raw_message=raw_message,
            effect=fields[0],
            annotations=_annotations(fields, 1),
        )


@dataclass(frozen=True)
class FieldEndEvent(FieldStartEvent):
    pass


@dataclass(frozen=True)
class SideStartEvent(BattleEvent):
    raw_message: str
    side: str
    condition: str
    annotations: Tuple[str, ...] = ()

    @classmethod
    def parse_raw_message(cls, raw_message: str) -> "SideStartEvent":
        fields = _fields(raw_message)
        return cls(
            raw_message=raw_message,
            side=fields[0].split(":")[0].strip()[:2],
            condition=fields[1],
            annotations=_annotations(fields, 2),
        )


@dataclass(frozen=True)
class SideEndEvent(SideStartEvent):
    pass


@dataclass(frozen=True)
class TerastallizeEvent(BattleEvent):
    raw_message: str
    pokemon: PokemonRef
    tera_type: str

    @classmethod
    def parse_raw_message(cls, raw_message: str) -> "TerastallizeEvent":
        fields = _fields(raw_message)
        return cls(
            raw_message=raw_message,
            pokemon=parse_pokemon_ref(fields[0]),
            tera_type=_field(fields, 1),
        )


@dataclass(frozen=True)
class FormeChangeEvent(BattleEvent):
    raw_message: str
    pokemon: PokemonRef
    species: str
    annotations: Tuple[str, ...] = ()

    @classmethod
    def parse_raw_message(cls, raw_message: str) -> "FormeChangeEvent":
        fields = _fields(raw_message)
        return cls(
            raw_message=raw_message,
            pokemon=parse_pokemon_ref(fields[0]),
            species=_field(fields, 1).split(",")[0].strip(),
            annotations=_annotations(fields, 2),
        )


@dataclass(frozen=True)
class DetailsChangeEvent(FormeChangeEvent):
    """Permanent forme change (Mega Evolution, Primal Reversion)."""


@dataclass(frozen=True)
class MessageEvent(BattleEvent):
    raw_message: str
    message: str

    @classmethod
    def parse_raw_message(cls, raw_message: str) -> "MessageEvent":
        return cls(raw_message=raw_message, message=" ".join(_fields(raw_message)).strip())


@dataclass(frozen=True)
class UnknownEvent(BattleEvent):
    raw_message: str
    message_type: str

    @classmethod
    def parse_raw_message(cls, raw_message: str) -> "UnknownEvent":
        parts = split_record(raw_message)
        return cls(raw_message=raw_message, message_type=parts[0] if parts else "")


@dataclass(frozen=True)
class IgnoredEvent(BattleEvent):
    """Known record that carries nothing a summary shows (chat, timers, upkeep)."""

    raw_message: str
    message_type: str

    @classmethod
    def parse_raw_message(cls, raw_message: str) -> "IgnoredEvent":
        parts = split_record(raw_message)
        return cls(raw_message=raw_message, message_type=parts[0] if parts else "")
