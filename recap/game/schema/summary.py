"""Per-turn summary records built while folding over a battle log."""

import html
import re
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from recap.game.schema.enums import ActionType

STAT_DELTA_RE = re.compile(r"^[+-]\d+ [A-Z]+(?:, [+-]\d+ [A-Z]+)*$")
HP_CHANGE_RE = re.compile(r"^(?:\d+%(?: [A-Z]+)?|KO)(?: → (?:\d+%(?: [A-Z]+)?|KO))?$")


@dataclass(frozen=True)
class DetailEntry:
    """One fact rendered both as plain text and as markup.

    Details about a specific Pokemon start with that Pokemon's frozen name
    (and icon, in markup). subject_ref/subject_text/subject_markup record
    that prefix so a renderer can drop it when the headline already names
    the Pokemon.
    """

    text: str
    markup: str
    subject_ref: Optional[str] = None
    subject_text: str = ""
    subject_markup: str = ""

    @classmethod
    def plain(cls, text: str) -> "DetailEntry":
        """Detail whose markup is the HTML-escaped text."""
        return cls(text=text, markup=html.escape(text, quote=False))

    def without_subject(self) -> Tuple[str, str]:
        """Text and markup with the leading subject name removed."""
        text = self.text
        markup = self.markup
        if self.subject_text and text.startswith(f"{self.subject_text} "):
            text = text[len(self.subject_text) + 1 :]
        if self.subject_markup and markup.startswith(f"{self.subject_markup} "):
            markup = markup[len(self.subject_markup) + 1 :]
        return text, markup

    def is_stat_delta(self) -> bool:
        text, _ = self.without_subject()
        return bool(STAT_DELTA_RE.match(text))

    def compact_body(self, target_ref: str) -> Optional[Tuple[str, str]]:
        """Subject-less text and markup if this detail fits a comma headline.

        Only stat-stage deltas and HP changes of target_ref qualify.
        """
        if self.subject_ref != target_ref:
            return None
        text, markup = self.without_subject()
        if STAT_DELTA_RE.match(text) or HP_CHANGE_RE.match(text):
            return text, markup
        return None

    def __bool__(self) -> bool:
        return bool(self.text or self.markup)


@dataclass(frozen=True)
class LeadEntry:
    """A Pokemon sent out before the first turn."""

    side: str
    text: str
    markup: str


@dataclass
class ActionSummary:
    """One in-turn deed with its accumulated details.

    Names and icons are frozen when the action is created. target_names is
    the only field patched afterwards (Protect / immunity suffixes).
    """

    action_type: ActionType
    verb: str
    move_id: Optional[str] = None
    actor_ref: Optional[str] = None
    actor_name: str = ""
    actor_icon: str = ""
    target_refs: List[str] = field(default_factory=list)
    target_names: List[str] = field(default_factory=list)
    target_icons: List[str] = field(default_factory=list)
    details: List[DetailEntry] = field(default_factory=list)
    from_icon: Optional[str] = None
    from_name: Optional[str] = None

    def target_index(self, ref: str) -> Optional[int]:
        try:
            return self.target_refs.index(ref)
        except ValueError:
            return None

    def mark_target(self, ref: str, suffix: str) -> bool:
        """Append a suffix such as " (Protect)" to a target's frozen name.

        Returns:
            True if ref is a target of this action
        """
        index = self.target_index(ref)
        if index is None:
            return False
        if not self.target_names[index].endswith(suffix):
            self.target_names[index] = f"{self.target_names[index]}{suffix}"
        return True


@dataclass
class TurnSummary:
    """Everything that happened between two turn records.

    Turn 0 is the lead phase; its lead_entries list who was sent out first.
    """

    turn: int
    label: Optional[str] = None
    header_events: List[DetailEntry] = field(default_factory=list)
    tera_events: List[DetailEntry] = field(default_factory=list)
    actions: List[ActionSummary] = field(default_factory=list)
    end_events: List[DetailEntry] = field(default_factory=list)
    lead_entries: List[LeadEntry] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not (self.actions or self.header_events or self.tera_events or self.lead_entries)
