"""HTTP client for fetching replay documents from a replay server."""

import json
from typing import Optional

import httpx
from absl import logging

from recap.game.exceptions import ReplayFetchError, ReplayValidationError
from recap.game.schema.replay_data import ReplayData, parse_replay_payload

MISSING_URL_MESSAGE = "Replay URL is required."


class ReplayClient:
    """Client for downloading replay JSON documents.

    Every replay page has a JSON twin at the same address plus ".json".

    Args:
        timeout: Request timeout in seconds; None waits indefinitely
        transport: Optional httpx transport (tests pass an httpx.MockTransport)
    """

    def __init__(
        self,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._timeout = timeout
        self._transport = transport

    @staticmethod
    def replay_json_url(url: str) -> str:
        """Address of the JSON document for a replay page.

        Examples:
            >>> ReplayClient.replay_json_url("https://replay.pokemonshowdown.com/gen9ou-1")
            'https://replay.pokemonshowdown.com/gen9ou-1.json'
        """
        url = url.strip()
        return url if url.endswith(".json") else f"{url}.json"

    async def fetch_replay(self, url: str) -> ReplayData:
        """Fetch and validate one replay document.

        Args:
            url: Replay page address, with or without the ".json" suffix

        Returns:
            Validated ReplayData

        Raises:
            ReplayValidationError: If url is blank or the document has no log
            ReplayFetchError: If the request fails, the server answers with a
                non-success status, or the body is not JSON
        """
        if not url or not url.strip():
            raise ReplayValidationError(MISSING_URL_MESSAGE)
        json_url = self.replay_json_url(url)

        logging.info("Fetching replay %s", json_url)
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.get(json_url, headers={"Accept": "application/json"})
        except httpx.HTTPError as e:
            raise ReplayFetchError(f"Failed to fetch replay: {e}", url=json_url) from e

        if not response.is_success:
            raise ReplayFetchError(
                f"Failed to fetch replay: {response.status_code} {response.reason_phrase}".strip(),
                url=json_url,
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except json.JSONDecodeError as e:
            raise ReplayFetchError("Failed to fetch replay: response was not JSON", url=json_url) from e
        replay = parse_replay_payload(payload)

        logging.info("Fetched replay %s (%d log characters)", replay.id or json_url, len(replay.log))
        return replay
