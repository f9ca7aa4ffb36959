"""Command-line entry point for summarizing a battle replay.

Summarizes either a replay fetched by address or a log stored on disk, and
prints the plain-text rendering, the markup rendering or a JSON document.

Examples:
    python -m recap.scripts.summarize_replay \
        --replay_url=https://replay.pokemonshowdown.com/gen9ou-2100000000
    python -m recap.scripts.summarize_replay --log_file=/tmp/battle.log --output=html
"""

import asyncio
import json
import sys
from pathlib import Path
from typing import List, Optional

from absl import app, flags, logging

from recap.game.exceptions import ReplayError, ReplayFetchError, ReplayValidationError
from recap.game.protocol.replay_client import ReplayClient
from recap.game.schema.replay_data import parse_replay_payload
from recap.game.summary.replay_service import summarize_replay
from recap.game.summary.replay_summarizer import ReplaySummarizer, SummarizedReplay

FLAGS = flags.FLAGS

# Input
flags.DEFINE_string(
    "replay_url",
    None,
    "Replay page address (the .json suffix is added when missing)",
)
flags.DEFINE_string(
    "log_file",
    None,
    "Path to a raw battle log, or to a replay JSON document",
)
flags.DEFINE_string("p1", None, "Name of the first player (log player records take precedence)")
flags.DEFINE_string("p2", None, "Name of the second player (log player records take precedence)")
flags.DEFINE_string("format", None, "Format name shown in the header")

# Output
flags.DEFINE_enum(
    "output",
    "text",
    ["text", "html", "json"],
    "What to print: the plain-text summary, the markup summary, or both plus metadata as JSON",
)
flags.DEFINE_float(
    "timeout",
    None,
    "Request timeout in seconds when fetching (default: wait indefinitely)",
)


def summarize_log_file(
    path: str,
    players: Optional[List[str]] = None,
    format_name: Optional[str] = None,
) -> SummarizedReplay:
    """Summarize a log file; files ending in .json are read as replay documents.

    Args:
        path: Raw battle log or replay JSON document
        players: Optional [p1, p2] names overriding the document's players
        format_name: Optional format overriding the document's format

    Raises:
        ReplayFetchError: If the file cannot be read
        ReplayValidationError: If a JSON document is malformed or has no log
    """
    try:
        content = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ReplayFetchError(f"Failed to read log file: {e}", url=path) from e
    summarizer = ReplaySummarizer()

    if path.endswith(".json"):
        try:
            payload = json.loads(content)
        except json.JSONDecodeError as e:
            raise ReplayValidationError(f"Replay JSON is invalid: {e}") from e
        replay = parse_replay_payload(payload)
        return summarizer.summarize_log(
            replay.log,
            players=players or replay.players,
            format_name=format_name or replay.format,
            replay_id=replay.id,
        )
    return summarizer.summarize_log(content, players=players, format_name=format_name)


def render_output(summary: SummarizedReplay, output: str) -> str:
    if output == "html":
        return summary.html
    if output == "json":
        return json.dumps(summary.to_dict(), indent=2, ensure_ascii=False)
    return summary.text


def main(argv: List[str]) -> None:
    """Entry point for the script."""
    del argv

    if bool(FLAGS.replay_url) == bool(FLAGS.log_file):
        raise app.UsageError("Pass exactly one of --replay_url or --log_file")

    try:
        if FLAGS.replay_url:
            logging.info(f"Summarizing replay {FLAGS.replay_url}")
            summary = asyncio.run(summarize_replay(FLAGS.replay_url, client=ReplayClient(timeout=FLAGS.timeout)))
        else:
            logging.info(f"Summarizing log file {FLAGS.log_file}")
            players = [FLAGS.p1 or "", FLAGS.p2 or ""] if (FLAGS.p1 or FLAGS.p2) else None
            summary = summarize_log_file(FLAGS.log_file, players=players, format_name=FLAGS.format)
    except ReplayError as e:
        print(str(e), file=sys.stderr)
        sys.exit(1)

    print(render_output(summary, FLAGS.output))


def run() -> None:
    app.run(main)


if __name__ == "__main__":
    run()
