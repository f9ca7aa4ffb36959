"""Renders TurnSummary records as markup and plain-text lines.

Both renderings share structure: a label line per turn, one indented line
per action, and one doubly indented line for the turn's trailing events.
"""

import html
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from recap.game.schema.enums import ActionType
from recap.game.schema.sprites import render_icon_label
from recap.game.schema.summary import ActionSummary, DetailEntry, LeadEntry, TurnSummary

ACTION_INDENT_TEXT = "  "
ACTION_INDENT_MARKUP = "&nbsp;&nbsp;"
TRAILING_INDENT_TEXT = "    "
TRAILING_INDENT_MARKUP = "&nbsp;&nbsp;&nbsp;&nbsp;"
DETAIL_SEPARATOR = "; "
COMPACT_SEPARATOR = ", "
DASH_SEPARATOR = " — "


@dataclass
class RenderedLines:
    """Parallel markup and text lines."""

    markup: List[str] = field(default_factory=list)
    text: List[str] = field(default_factory=list)

    def add(self, markup: str, text: str) -> None:
        self.markup.append(markup)
        self.text.append(text)

    def extend(self, other: "RenderedLines") -> None:
        self.markup.extend(other.markup)
        self.text.extend(other.text)


def turn_label(turn: TurnSummary) -> str:
    """Display label of a turn: Lead for the lead phase, else T{number}."""
    if turn.label:
        return turn.label
    return "Lead" if turn.turn == 0 else f"T{turn.turn}"


def _name_markup(icon_id: Optional[str], name: str) -> str:
    if icon_id:
        return render_icon_label(icon_id, name)
    return html.escape(name, quote=False)


def action_headline(action: ActionSummary) -> Tuple[str, str]:
    """Markup and text of an action's headline.

    Switches read "<previous> → <incoming> switches"; everything else reads
    "<actor> <verb>" plus "→ <targets>" for two-party actions.

    Returns:
        (markup, text)
    """
    actor_name = action.actor_name or "?"
    actor_markup = _name_markup(action.actor_icon, actor_name)

    if action.action_type == ActionType.SWITCH and action.from_name:
        from_markup = _name_markup(action.from_icon, action.from_name)
        return (
            f"{from_markup} → {actor_markup} {html.escape(action.verb, quote=False)}",
            f"{action.from_name} → {actor_name} {action.verb}",
        )

    markup = f"{actor_markup} {html.escape(action.verb, quote=False)}"
    text = f"{actor_name} {action.verb}"
    if action.target_names:
        icons = action.target_icons + [""] * (len(action.target_names) - len(action.target_icons))
        target_markup = ", ".join(_name_markup(icon, name) for icon, name in zip(icons, action.target_names))
        markup = f"{markup} → {target_markup}"
        text = f"{text} → {', '.join(action.target_names)}"
    return markup, text


def compact_details(action: ActionSummary) -> Optional[Tuple[str, str]]:
    """Detail list for the comma form, or None when the dash form applies.

    The comma form needs exactly one target and details that are all stat
    changes or HP changes of that target; the target's name is dropped from
    them since the headline already shows it.
    """
    if len(action.target_refs) != 1 or not action.details:
        return None
    bodies = [detail.compact_body(action.target_refs[0]) for detail in action.details]
    if any(body is None for body in bodies):
        return None
    return (
        DETAIL_SEPARATOR.join(markup for _, markup in bodies),
        DETAIL_SEPARATOR.join(text for text, _ in bodies),
    )


def render_action(action: ActionSummary) -> Tuple[str, str]:
    """One action as (markup, text), details included."""
    markup, text = action_headline(action)
    details = [detail for detail in action.details if detail]
    if not details:
        return markup, text

    compact = compact_details(action)
    if compact is not None:
        return f"{markup}{COMPACT_SEPARATOR}{compact[0]}", f"{text}{COMPACT_SEPARATOR}{compact[1]}"
    return (
        f"{markup}{DASH_SEPARATOR}{DETAIL_SEPARATOR.join(d.markup for d in details)}",
        f"{text}{DASH_SEPARATOR}{DETAIL_SEPARATOR.join(d.text for d in details)}",
    )


def _lead_columns(entries: List[LeadEntry]) -> Tuple[str, str]:
    p1 = [entry for entry in entries if entry.side == "p1"]
    p2 = [entry for entry in entries if entry.side == "p2"]
    markup = f"{''.join(e.markup for e in p1)}&nbsp;vs&nbsp;{''.join(e.markup for e in p2)}"
    text = f"{', '.join(e.text for e in p1)} vs {', '.join(e.text for e in p2)}"
    return markup, text


def _joined(details: List[DetailEntry]) -> Tuple[str, str]:
    return (
        DETAIL_SEPARATOR.join(detail.markup for detail in details),
        DETAIL_SEPARATOR.join(detail.text for detail in details),
    )


def render_turn(turn: TurnSummary) -> RenderedLines:
    """Render one turn. Callers skip turns where turn.is_empty()."""
    lines = RenderedLines()
    label = turn_label(turn)

    label_markup = f"<strong>{html.escape(label, quote=False)}</strong>"
    label_text = label
    if turn.lead_entries:
        columns_markup, columns_text = _lead_columns(turn.lead_entries)
        label_markup = f"{label_markup} {columns_markup}"
        label_text = f"{label_text} {columns_text}"
    headers = [detail for detail in turn.header_events if detail]
    if headers:
        headers_markup, headers_text = _joined(headers)
        label_markup = f"{label_markup} {headers_markup}"
        label_text = f"{label_text} {headers_text}"
    lines.add(f"<div>{label_markup}</div>", label_text)

    for detail in turn.tera_events:
        lines.add(
            f"<div>{ACTION_INDENT_MARKUP}{detail.markup}</div>",
            f"{ACTION_INDENT_TEXT}{detail.text}",
        )

    for action in turn.actions:
        markup, text = render_action(action)
        lines.add(f"<div>{ACTION_INDENT_MARKUP}{markup}</div>", f"{ACTION_INDENT_TEXT}{text}")

    trailing = [detail for detail in turn.end_events if detail]
    if trailing:
        markup, text = _joined(trailing)
        lines.add(f"<div>{TRAILING_INDENT_MARKUP}{markup}</div>", f"{TRAILING_INDENT_TEXT}{text}")

    return lines
