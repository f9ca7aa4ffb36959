"""Top-level summarizer: battle log in, markup + text + metadata out."""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

from absl import logging

from recap.game.exceptions import ReplayValidationError
from recap.game.protocol.message_parser import MessageParser
from recap.game.schema.replay_data import MISSING_LOG_MESSAGE, ReplayData
from recap.game.summary.event_dispatcher import EventDispatcher
from recap.game.summary.parse_context import ParseContext
from recap.game.summary.summary_assembler import render_summary, resolve_result


@dataclass(frozen=True)
class ReplayMeta:
    """Metadata reported next to the rendered summary.

    Attributes:
        id: Replay identifier, when known
        format: Format name (from the caller or the log)
        players: Player names, first side first
        winner: Winner name, if the battle finished
        loser: Loser name, explicit or inferred from the winner
        result_note: How the battle ended ("Forfeit"), if notable
    """

    id: Optional[str] = None
    format: Optional[str] = None
    players: List[str] = field(default_factory=list)
    winner: Optional[str] = None
    loser: Optional[str] = None
    result_note: Optional[str] = None


@dataclass(frozen=True)
class SummarizedReplay:
    """Rendered summary of one replay.

    Attributes:
        html: Markup rendering (one <div> per line)
        text: Plain-text rendering
        meta: Battle metadata
    """

    html: str
    text: str
    meta: ReplayMeta

    def to_dict(self) -> Dict[str, Any]:
        return {"html": self.html, "text": self.text, "meta": asdict(self.meta)}


class ReplaySummarizer:
    """Folds a battle log into a SummarizedReplay.

    Each call runs on a fresh ParseContext, so one summarizer can be reused
    for any number of logs and the same input always renders the same way.

    Examples:
        >>> summarizer = ReplaySummarizer()
        >>> result = summarizer.summarize_log("|player|p1|Ash\\n|player|p2|Misty\\n|win|Ash")
        >>> result.meta.loser
        'Misty'
    """

    def __init__(self, parser: Optional[MessageParser] = None):
        self._parser = parser or MessageParser()

    def summarize_log(
        self,
        log: Optional[str],
        players: Optional[List[str]] = None,
        format_name: Optional[str] = None,
        replay_id: Optional[str] = None,
    ) -> SummarizedReplay:
        """Summarize a raw battle log.

        Args:
            log: Newline-separated battle log
            players: Optional [p1, p2] names; player records in the log win
            format_name: Optional format name; takes precedence over the log
            replay_id: Optional identifier copied into the metadata

        Returns:
            SummarizedReplay with markup, text and metadata

        Raises:
            ReplayValidationError: If the log is missing or blank
        """
        if not log or not log.strip():
            raise ReplayValidationError(MISSING_LOG_MESSAGE)

        ctx = ParseContext()
        for side, name in zip(("p1", "p2"), players or []):
            if name and name.strip():
                ctx.players[side] = name.strip()
        if format_name and format_name.strip():
            ctx.format_name = format_name.strip()

        events = self._parser.parse_log(log)
        for event in events:
            EventDispatcher.apply(ctx, event)
        ctx.flush_ability_boost()
        ctx.flush_field_ends()

        result = resolve_result(ctx)
        markup, text = render_summary(ctx, result)
        logging.info(
            f"Summarized {len(events)} records into {len(ctx.turns) - 1} turns "
            f"({ctx.players['p1']} vs {ctx.players['p2']})"
        )
        return SummarizedReplay(
            html=markup,
            text=text,
            meta=ReplayMeta(
                id=replay_id,
                format=ctx.resolved_format(),
                players=[ctx.players["p1"], ctx.players["p2"]],
                winner=result.winner,
                loser=result.loser,
                result_note=ctx.result_note,
            ),
        )

    def summarize(self, data: ReplayData) -> SummarizedReplay:
        """Summarize a validated replay document."""
        return self.summarize_log(
            data.log,
            players=data.players,
            format_name=data.format,
            replay_id=data.id,
        )
