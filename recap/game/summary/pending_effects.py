"""Effects held back until a later record decides where they belong."""

import html
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from recap.game.schema.sprites import render_icon, render_icon_label
from recap.game.schema.summary import ActionSummary, DetailEntry, TurnSummary
from recap.game.schema.utils import possessive


@dataclass
class _BoostTarget:
    name: str
    icon_id: str
    deltas: List[str] = field(default_factory=list)


@dataclass
class PendingAbilityBoost:
    """Stat changes caused by one ability announcement (Intimidate, Download).

    The ability record arrives first and the stat changes follow, one record
    per affected Pokemon. They are collected here and folded into a single
    line when the next action or turn starts.

    Attributes:
        source_ref: Slot of the ability holder
        source_name: Frozen display name of the holder
        source_icon: Icon id of the holder
        ability: Ability display name
        anchor_turn: Turn open when the ability was announced
        anchor_action: Action open when the ability was announced, if any
    """

    source_ref: str
    source_name: str
    source_icon: str
    ability: str
    anchor_turn: TurnSummary
    anchor_action: Optional[ActionSummary] = None
    targets: Dict[str, _BoostTarget] = field(default_factory=dict)

    def add(self, ref: str, name: str, icon_id: str, delta: str) -> None:
        target = self.targets.get(ref)
        if target is None:
            target = _BoostTarget(name=name, icon_id=icon_id)
            self.targets[ref] = target
        target.deltas.append(delta)

    def to_detail(self) -> DetailEntry:
        """Fold the collected changes into one line.

        Examples:
            "Gyarados' Intimidate: Garchomp -1 ATK; Landorus -1 ATK"
            "Porygon-Z's Download: +1 SPA"
        """
        subject_text = possessive(self.source_name)
        subject_markup = f"{render_icon(self.source_icon, self.source_name)}{html.escape(subject_text, quote=False)}"
        heading_text = f"{subject_text} {self.ability}"
        heading_markup = f"{subject_markup} {html.escape(self.ability, quote=False)}"

        text_groups = []
        markup_groups = []
        for ref, target in self.targets.items():
            deltas = ", ".join(target.deltas)
            if ref == self.source_ref:
                text_groups.append(deltas)
                markup_groups.append(html.escape(deltas, quote=False))
            else:
                text_groups.append(f"{target.name} {deltas}")
                markup_groups.append(
                    f"{render_icon_label(target.icon_id, target.name)} {html.escape(deltas, quote=False)}"
                )

        if not text_groups:
            return DetailEntry(
                text=heading_text,
                markup=heading_markup,
                subject_ref=self.source_ref,
                subject_text=subject_text,
                subject_markup=subject_markup,
            )
        return DetailEntry(
            text=f"{heading_text}: {'; '.join(text_groups)}",
            markup=f"{heading_markup}: {'; '.join(markup_groups)}",
            subject_ref=self.source_ref,
            subject_text=subject_text,
            subject_markup=subject_markup,
        )


@dataclass
class PendingFieldEnds:
    """Names of field effects that expired but have not been announced yet."""

    names: List[str] = field(default_factory=list)

    def add(self, name: str) -> None:
        if name and name not in self.names:
            self.names.append(name)

    def drain(self) -> Optional[DetailEntry]:
        """Return one "A, B ended" line and clear the buffer, or None if empty."""
        if not self.names:
            return None
        detail = DetailEntry.plain(f"{', '.join(self.names)} ended")
        self.names.clear()
        return detail

    def __len__(self) -> int:
        return len(self.names)
