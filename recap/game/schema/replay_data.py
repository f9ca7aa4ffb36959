"""Schema of a replay document (the JSON served next to every replay page)."""

from typing import Any, List, Optional

import pydantic
from pydantic import BaseModel, Field, field_validator

from recap.game.exceptions import ReplayValidationError

MISSING_LOG_MESSAGE = "Replay JSON did not include a log field."


class ReplayData(BaseModel):
    id: Optional[str] = Field(default=None, description="Replay identifier")
    format: Optional[str] = Field(default=None, description="Format display name")
    log: str = Field(description="Newline-separated battle log")
    players: List[str] = Field(
        default_factory=list, description="Player names, first side first"
    )
    rating: Optional[int] = Field(default=None, description="Ladder rating, if rated")

    @field_validator("log")
    @classmethod
    def log_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("log must not be blank")
        return value


def parse_replay_payload(payload: Any) -> ReplayData:
    """Validate a decoded replay document.

    Raises:
        ReplayValidationError: If the payload is not an object, has no usable
            log, or fails the schema otherwise
    """
    if not isinstance(payload, dict):
        raise ReplayValidationError(MISSING_LOG_MESSAGE)
    try:
        return ReplayData.model_validate(payload)
    except pydantic.ValidationError as e:
        if any(error["loc"] and error["loc"][0] == "log" for error in e.errors()):
            raise ReplayValidationError(MISSING_LOG_MESSAGE) from e
        raise ReplayValidationError(f"Replay JSON is invalid: {e}") from e
