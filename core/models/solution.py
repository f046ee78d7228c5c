"""Data models for solution requests and results."""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class RequestMode(Enum):
    """Flavor of the request currently shown to the user.

    ANALYZE: one screenshot in, fresh problem/solution breakdown out
    DEBUG: problem plus attempt screenshots in, revised code out
    """
    ANALYZE = "analyze"
    DEBUG = "debug"


class SolutionResult(BaseModel):
    """Structured answer decoded from the model output.

    The model is asked for a JSON object but nothing enforces it, so every
    field is optional. Wire names are accepted as aliases.
    """
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    problem_statement: Optional[str] = None
    approach_notes: Optional[List[str]] = Field(default=None, alias="thoughts")
    code: Optional[str] = None
    time_complexity: Optional[str] = None
    space_complexity: Optional[str] = None
    revised_code: Optional[str] = Field(default=None, alias="new_code")

    @property
    def display_code(self) -> Optional[str]:
        """Code to show: the revision when present, else the original."""
        return self.revised_code or self.code

    def to_dict(self) -> dict:
        """Serialize with wire names, dropping absent fields."""
        return self.model_dump(by_alias=True, exclude_none=True)


@dataclass(frozen=True)
class RequestSnapshot:
    """Point-in-time copy of the request state, carried by change events."""
    is_in_flight: bool
    mode: RequestMode
    last_result: Optional[SolutionResult]
    last_error: Optional[Exception]
