"""Fetch-and-summarize entry points for callers holding a replay address."""

from typing import Any, Dict, Optional

from absl import logging

from recap.game.exceptions import ReplayError
from recap.game.protocol.replay_client import ReplayClient
from recap.game.summary.replay_summarizer import ReplaySummarizer, SummarizedReplay


async def summarize_replay(
    url: str,
    client: Optional[ReplayClient] = None,
    summarizer: Optional[ReplaySummarizer] = None,
) -> SummarizedReplay:
    """Fetch a replay and summarize it.

    Raises:
        ReplayError: If the replay cannot be fetched or has no log
    """
    client = client or ReplayClient()
    summarizer = summarizer or ReplaySummarizer()
    replay = await client.fetch_replay(url)
    return summarizer.summarize(replay)


async def summarize_replay_url(
    url: str,
    client: Optional[ReplayClient] = None,
    summarizer: Optional[ReplaySummarizer] = None,
) -> Dict[str, Any]:
    """Summarize a replay for a JSON-speaking caller.

    Returns:
        {"html", "text", "meta"} on success, {"error": message} on failure
    """
    try:
        summary = await summarize_replay(url, client=client, summarizer=summarizer)
    except ReplayError as e:
        logging.warning("Replay summary failed for %r: %s", url, e)
        return {"error": str(e)}
    return summary.to_dict()
