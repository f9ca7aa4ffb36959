"""Assembles the full summary document from a folded ParseContext."""

import html
from dataclasses import dataclass
from typing import Optional, Tuple

from recap.game.schema.object_name_normalizer import normalize_name
from recap.game.schema.pokemon_state import icon_id_for
from recap.game.schema.sprites import render_icon
from recap.game.summary.parse_context import ParseContext
from recap.game.summary.turn_renderer import RenderedLines, render_turn

WINNER_TAG = "[W] "
LOSER_TAG = "[L] "


@dataclass(frozen=True)
class BattleResult:
    """Winner and loser names, resolved against the two player names.

    Attributes:
        winner: Name from the win record, if any
        loser: Explicit loser, else the other player when the winner is known
        winner_side: "p1"/"p2" when the winner matches a player
        loser_side: "p1"/"p2" when the loser matches a player
    """

    winner: Optional[str] = None
    loser: Optional[str] = None
    winner_side: Optional[str] = None
    loser_side: Optional[str] = None


def _side_for(ctx: ParseContext, name: Optional[str]) -> Optional[str]:
    if not name:
        return None
    name_id = normalize_name(name)
    for side, player in ctx.players.items():
        if normalize_name(player) == name_id:
            return side
    return None


def resolve_result(ctx: ParseContext) -> BattleResult:
    """Work out winner and loser.

    An explicit loser (leave or forfeit record) wins over inference; without
    one, the player who is not the winner lost. A winner who left the room
    mid-battle and came back is never the loser.
    """
    winner_side = _side_for(ctx, ctx.winner)
    loser = ctx.loser
    loser_side = _side_for(ctx, loser)
    if loser_side is not None and loser_side == winner_side:
        loser = None
        loser_side = None
    if loser_side is not None:
        loser = ctx.players[loser_side]
    if not loser and winner_side is not None:
        loser_side = "p2" if winner_side == "p1" else "p1"
        loser = ctx.players[loser_side]
    return BattleResult(winner=ctx.winner, loser=loser, winner_side=winner_side, loser_side=loser_side)


def _result_tag(side: str, result: BattleResult) -> str:
    if side == result.winner_side:
        return WINNER_TAG
    if side == result.loser_side:
        return LOSER_TAG
    return ""


def render_header(ctx: ParseContext, result: Optional[BattleResult] = None) -> Tuple[str, str]:
    """Header line: "[W] Ash vs [L] Misty — gen9ou (Forfeit)"."""
    result = result or resolve_result(ctx)
    p1 = f"{_result_tag('p1', result)}{ctx.players['p1']}"
    p2 = f"{_result_tag('p2', result)}{ctx.players['p2']}"
    suffix = ""
    format_name = ctx.resolved_format()
    if format_name:
        suffix = f" — {format_name}"
    if ctx.result_note:
        suffix = f"{suffix} ({ctx.result_note})"
    markup = (
        f"<div><strong>{html.escape(p1, quote=False)}</strong> vs "
        f"<strong>{html.escape(p2, quote=False)}</strong>{html.escape(suffix, quote=False)}</div>"
    )
    return markup, f"{p1} vs {p2}{suffix}"


def render_team_preview(ctx: ParseContext) -> Optional[Tuple[str, str]]:
    """Team preview line, or None when neither roster has any species."""
    teams = ctx.registry.teams
    if not any(len(team) for team in teams.values()):
        return None
    icons = {
        side: "".join(render_icon(icon_id_for(species), species) for species in team.species)
        for side, team in teams.items()
    }
    names = {side: " · ".join(team.species) for side, team in teams.items()}
    markup = f"<div><strong>Team Preview:</strong> {icons['p1']}&nbsp;&nbsp;vs&nbsp;&nbsp;{icons['p2']}</div>"
    text = f"Team Preview: {ctx.players['p1']} {names['p1']} vs {ctx.players['p2']} {names['p2']}"
    return markup, text


def render_summary(ctx: ParseContext, result: Optional[BattleResult] = None) -> Tuple[str, str]:
    """Render the whole document.

    Order is header, team preview, every non-empty turn, then (text only) a
    closing winner line.

    Returns:
        (markup, text), each newline-joined
    """
    result = result or resolve_result(ctx)
    lines = RenderedLines()
    lines.add(*render_header(ctx, result))

    preview = render_team_preview(ctx)
    if preview is not None:
        lines.add(*preview)

    for turn in ctx.turns:
        if turn.is_empty():
            continue
        lines.extend(render_turn(turn))

    text_lines = list(lines.text)
    if result.winner:
        text_lines.append(f"Winner: {result.winner}")
    return "\n".join(lines.markup), "\n".join(text_lines)
