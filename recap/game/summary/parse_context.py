"""Mutable state threaded through one summary run."""

import html
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set

from absl import logging

from recap.game.schema.pokemon_ref import side_of
from recap.game.schema.pokemon_state import PokemonRegistry
from recap.game.schema.sprites import render_icon
from recap.game.schema.summary import ActionSummary, DetailEntry, TurnSummary
from recap.game.schema.utils import possessive
from recap.game.summary.pending_effects import PendingAbilityBoost, PendingFieldEnds

DEFAULT_PLAYER_NAMES = {"p1": "Player 1", "p2": "Player 2"}
LEAD_LABEL = "Lead"


def _lead_turn() -> List[TurnSummary]:
    return [TurnSummary(turn=0, label=LEAD_LABEL)]


@dataclass
class ParseContext:
    """Everything the dispatcher reads and writes while folding over a log.

    A context belongs to exactly one run. Turn 0 (the lead phase) exists from
    construction; every turn record appends a new TurnSummary.

    Attributes:
        players: Display name per side, defaulting to "Player 1"/"Player 2"
        format_name: Caller-supplied format, else the first non-empty tier record
        generation: Generation number from the gen record
        turns: Turn summaries in log order
        current_action: Action that absorbs in-turn details, if one is open
        registry: Pokemon state per battler slot plus team rosters
        winner: Name from the win record
        loser: Name inferred from a leave or forfeit record
        result_note: Short note about how the battle ended ("Forfeit")
        lead_phase: True until the first turn record
        fainted_this_turn: Slots that fainted during the current turn
        moves_this_turn: Move ids used during the current turn, in order
        protecting_this_turn: Slots that used a protecting move this turn
        side_conditions: Active hazard/screen ids per side
        active_weather: Display name of the current weather, if any
        pending_ability_boost: Ability stat changes waiting to be folded
        pending_field_ends: Field expiries waiting to be announced
    """

    players: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_PLAYER_NAMES))
    format_name: Optional[str] = None
    generation: Optional[str] = None
    turns: List[TurnSummary] = field(default_factory=_lead_turn)
    current_action: Optional[ActionSummary] = None
    registry: PokemonRegistry = field(default_factory=PokemonRegistry)
    winner: Optional[str] = None
    loser: Optional[str] = None
    result_note: Optional[str] = None
    lead_phase: bool = True
    fainted_this_turn: Set[str] = field(default_factory=set)
    moves_this_turn: List[str] = field(default_factory=list)
    protecting_this_turn: Set[str] = field(default_factory=set)
    side_conditions: Dict[str, Set[str]] = field(default_factory=lambda: {"p1": set(), "p2": set()})
    active_weather: Optional[str] = None
    pending_ability_boost: Optional[PendingAbilityBoost] = None
    pending_field_ends: PendingFieldEnds = field(default_factory=PendingFieldEnds)

    @property
    def current_turn(self) -> TurnSummary:
        return self.turns[-1]

    def start_turn(self, turn_number: int) -> TurnSummary:
        """Close the current turn and open turn_number.

        A repeated turn number keeps the open turn.
        """
        self.flush_ability_boost()
        self.flush_field_ends()
        self.current_action = None
        self.lead_phase = False
        self.fainted_this_turn.clear()
        self.moves_this_turn.clear()
        self.protecting_this_turn.clear()

        if turn_number <= self.current_turn.turn:
            logging.debug(f"Turn {turn_number} repeated, keeping turn {self.current_turn.turn} open")
            return self.current_turn
        turn = TurnSummary(turn=turn_number)
        self.turns.append(turn)
        return turn

    def open_action(self, action: ActionSummary) -> None:
        self.current_turn.actions.append(action)
        self.current_action = action

    def append_detail(self, detail: DetailEntry) -> None:
        """Attach a detail to the open action, or to the turn's trailing lines."""
        if self.current_action is not None:
            self.current_action.details.append(detail)
        else:
            self.current_turn.end_events.append(detail)

    def push_header(self, detail: DetailEntry, turn: Optional[TurnSummary] = None) -> None:
        """Turn-level line: a header before any action, a trailing line after."""
        turn = turn or self.current_turn
        if turn.actions:
            turn.end_events.append(detail)
        else:
            turn.header_events.append(detail)

    def flush_ability_boost(self) -> None:
        pending = self.pending_ability_boost
        if pending is None:
            return
        self.pending_ability_boost = None
        detail = pending.to_detail()
        logging.debug(f"Flushing ability boost: {detail.text}")
        if pending.anchor_action is not None:
            pending.anchor_action.details.append(detail)
        else:
            self.push_header(detail, pending.anchor_turn)

    def flush_field_ends(self) -> None:
        detail = self.pending_field_ends.drain()
        if detail is not None:
            logging.debug(f"Flushing field ends into turn {self.current_turn.turn}: {detail.text}")
            self.current_turn.end_events.append(detail)

    def resolved_format(self) -> Optional[str]:
        """Format name, falling back to "Gen N" when only a gen record was seen."""
        if self.format_name:
            return self.format_name
        if self.generation:
            return f"Gen {self.generation}"
        return None

    def player_name(self, side: str) -> str:
        return self.players.get(side, side)

    def subject_detail(self, ref: str, body: str, owner: bool = False) -> DetailEntry:
        """Detail about one Pokemon, prefixed with its frozen icon and name.

        Args:
            ref: Slot the detail is about
            body: Text following the name
            owner: Use the possessive form ("Garchomp's Rough Skin")
        """
        pokemon = self.registry.get_or_create(ref, side_of(ref))
        name = self.registry.display_name(ref)
        subject_text = possessive(name) if owner else name
        subject_markup = f"{render_icon(pokemon.icon_id, name)}{html.escape(subject_text, quote=False)}"
        return DetailEntry(
            text=f"{subject_text} {body}",
            markup=f"{subject_markup} {html.escape(body, quote=False)}",
            subject_ref=ref,
            subject_text=subject_text,
            subject_markup=subject_markup,
        )
