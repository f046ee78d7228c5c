"""Solution client for OpenAI-style chat-completion vision endpoints."""

import asyncio
import functools
import logging
from typing import Any, Callable, Dict, List, Optional, Sequence

import requests
from PIL import Image

from core.interfaces.solution import (
    ISolutionClient,
    HttpStatusError,
    InvalidInputError,
    MissingCredentialError,
    ProviderError,
    TransportError,
)
from core.models.config import ProviderConfig
from core.models.solution import SolutionResult
from modules.solver.encoding import encode_image
from modules.solver.prompts import build_analyze_messages, build_debug_messages
from modules.solver.response_parser import parse_error_message, parse_solution

logger = logging.getLogger(__name__)


class OpenAISolutionClient(ISolutionClient):
    """Sends screenshots to a chat-completion endpoint.

    Each call makes a single POST with no retry. Encoding, request
    building and parsing run on the calling loop; only the HTTP round
    trip is handed to the default executor.
    """

    def __init__(
        self,
        api_key_provider: Callable[[], Optional[str]],
        config: Optional[ProviderConfig] = None,
        session: Optional[requests.Session] = None
    ):
        """Initialize the client.

        Args:
            api_key_provider: Returns the current API key (read on every call)
            config: Endpoint, model and payload settings
            session: HTTP session to use (None = create one)
        """
        self._api_key_provider = api_key_provider
        self._config = config or ProviderConfig()
        self._session = session or requests.Session()

    async def analyze(self, image: Image.Image, language: str) -> SolutionResult:
        """Request a solution for the problem shown in one screenshot."""
        api_key = self._require_api_key()
        if image is None:
            raise InvalidInputError("No screenshot to analyze")

        encoded = encode_image(image, self._config.jpeg_quality)
        messages = build_analyze_messages(encoded, language)

        logger.info(f"Requesting solution in {language} from {self._config.model}")
        return await self._send(api_key, messages)

    async def debug(
        self,
        prior_images: Sequence[Image.Image],
        new_image: Image.Image,
        language: str
    ) -> SolutionResult:
        """Request a critique of an attempted solution."""
        api_key = self._require_api_key()
        if not prior_images:
            raise InvalidInputError("Debugging needs at least one earlier screenshot")
        if new_image is None:
            raise InvalidInputError("Debugging needs a new screenshot")

        encoded = [
            encode_image(img, self._config.jpeg_quality)
            for img in list(prior_images) + [new_image]
        ]
        messages = build_debug_messages(encoded, language)

        logger.info(
            f"Requesting debug review of {len(encoded)} screenshot(s) "
            f"in {language} from {self._config.model}"
        )
        return await self._send(api_key, messages)

    def build_payload(self, messages: List[Dict[str, Any]]) -> Dict[str, Any]:
        """Request body for the given chat messages."""
        return {
            "model": self._config.model,
            "messages": messages,
            "max_tokens": self._config.max_tokens,
            "response_format": {"type": "json_object"},
        }

    def close(self) -> None:
        self._session.close()

    def _require_api_key(self) -> str:
        api_key = self._api_key_provider()
        if not api_key or not api_key.strip():
            logger.warning("No API key configured, request not sent")
            raise MissingCredentialError()
        return api_key.strip()

    async def _send(self, api_key: str, messages: List[Dict[str, Any]]) -> SolutionResult:
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {api_key}",
        }
        post = functools.partial(
            self._session.post,
            self._config.api_url,
            headers=headers,
            json=self.build_payload(messages),
            timeout=self._config.timeout_seconds,
        )

        loop = asyncio.get_running_loop()
        try:
            response = await loop.run_in_executor(None, post)
        except requests.RequestException as e:
            logger.error(f"Request to {self._config.api_url} failed: {e}")
            raise TransportError(f"Network error: {e}") from e

        if response.status_code != 200:
            message = parse_error_message(response.content)
            logger.error(
                f"Provider returned HTTP {response.status_code}"
                + (f": {message}" if message else "")
            )
            if message:
                raise ProviderError(message)
            raise HttpStatusError(response.status_code)

        result = parse_solution(response.content)
        logger.info("Solution received")
        return result
