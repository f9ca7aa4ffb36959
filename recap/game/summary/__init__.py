"""Folding battle events into per-turn summaries and rendering them."""

from recap.game.summary.event_dispatcher import EventDispatcher
from recap.game.summary.parse_context import ParseContext
from recap.game.summary.replay_service import summarize_replay, summarize_replay_url
from recap.game.summary.replay_summarizer import ReplayMeta, ReplaySummarizer, SummarizedReplay

__all__ = [
    "EventDispatcher",
    "ParseContext",
    "ReplayMeta",
    "ReplaySummarizer",
    "SummarizedReplay",
    "summarize_replay",
    "summarize_replay_url",
]
