"""Decoding of provider responses into solution results.

The provider is asked for a JSON object but the response shape is not
guaranteed. A successful body is either a chat-completion envelope whose
first choice carries the answer as a JSON string, or the answer object
itself. The envelope is tried first; the bare object is the fallback.
"""

import json
import logging
from typing import Any, List, Optional, Union

from pydantic import BaseModel, ValidationError

from core.interfaces.solution import ParseError
from core.models.solution import SolutionResult

logger = logging.getLogger(__name__)


class _EnvelopeMessage(BaseModel):
    content: Optional[str] = None


class _EnvelopeChoice(BaseModel):
    message: _EnvelopeMessage


class ChatCompletionEnvelope(BaseModel):
    """The parts of a chat-completion response this client reads."""
    choices: List[_EnvelopeChoice]

    def first_content(self) -> Optional[str]:
        if not self.choices:
            return None
        return self.choices[0].message.content


def strip_code_fence(text: str) -> str:
    """Remove a surrounding Markdown code fence, if any."""
    text = text.strip()
    if text.startswith("```"):
        first_newline = text.find("\n")
        text = text[first_newline + 1:] if first_newline != -1 else text[3:]
        if text.rstrip().endswith("```"):
            text = text.rstrip()[:-3]
    return text.strip()


def _load_json(raw: Union[bytes, str], what: str) -> Any:
    try:
        return json.loads(raw)
    except (TypeError, ValueError) as e:
        raise ParseError(f"{what} is not valid JSON: {e}") from e


def _to_result(payload: Any, what: str) -> SolutionResult:
    try:
        return SolutionResult.model_validate(payload)
    except ValidationError as e:
        raise ParseError(f"{what} does not match the solution format: {e}") from e


def extract_envelope_content(payload: Any) -> Optional[str]:
    """Return the first choice's text if ``payload`` is an envelope."""
    try:
        envelope = ChatCompletionEnvelope.model_validate(payload)
    except ValidationError:
        return None
    return envelope.first_content()


def parse_solution(body: Union[bytes, str]) -> SolutionResult:
    """Decode a successful response body.

    Args:
        body: Raw response body

    Returns:
        Decoded solution; fields the model left out are None

    Raises:
        ParseError: If the body decodes under neither shape
    """
    payload = _load_json(body, "Response body")

    content = extract_envelope_content(payload)
    if content is not None:
        logger.debug("Decoding solution from response envelope")
        inner = _load_json(strip_code_fence(content), "Message content")
        return _to_result(inner, "Message content")

    logger.debug("Response is not an envelope, decoding body directly")
    return _to_result(payload, "Response body")


def parse_error_message(body: Union[bytes, str]) -> Optional[str]:
    """Pull ``error.message`` out of a failed response body, if present."""
    try:
        payload = json.loads(body)
    except (TypeError, ValueError):
        return None

    if not isinstance(payload, dict):
        return None
    error = payload.get("error")
    if not isinstance(error, dict):
        return None
    message = error.get("message")
    return message if isinstance(message, str) else None
