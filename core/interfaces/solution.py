"""Interface and errors for solution clients."""

from abc import ABC, abstractmethod
from typing import Sequence
from PIL import Image

from core.models.solution import SolutionResult


class SolutionClientError(Exception):
    """Base class for every failure of a solution request."""
    pass


class MissingCredentialError(SolutionClientError):
    """No API key is configured. Raised before any network call."""

    def __init__(self, message: str = "API key not set. Please set your API key and try again."):
        super().__init__(message)


class InvalidInputError(SolutionClientError):
    """The caller passed too few images for the request."""
    pass


class EncodingError(SolutionClientError):
    """An image could not be converted to the wire format."""
    pass


class HttpStatusError(SolutionClientError):
    """Non-success status without a readable provider message."""

    def __init__(self, status_code: int):
        self.status_code = status_code
        super().__init__(f"Request failed with HTTP status {status_code}")


class ProviderError(SolutionClientError):
    """Non-success status carrying the provider's own message."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ParseError(SolutionClientError):
    """Response body matched neither expected shape."""
    pass


class TransportError(SolutionClientError):
    """Network-level failure (DNS, connection, timeout)."""
    pass


class ISolutionClient(ABC):
    """Sends screenshots to a vision model and decodes the answer.

    Implementations make exactly one attempt per call and raise a
    ``SolutionClientError`` subclass on failure.
    """

    @abstractmethod
    async def analyze(self, image: Image.Image, language: str) -> SolutionResult:
        """Request a solution for the problem shown in one screenshot.

        Args:
            image: Screenshot of the problem
            language: Programming language for the solution code

        Returns:
            Decoded solution

        Raises:
            SolutionClientError: On any failure
        """
        pass

    @abstractmethod
    async def debug(
        self,
        prior_images: Sequence[Image.Image],
        new_image: Image.Image,
        language: str
    ) -> SolutionResult:
        """Request a critique of an attempted solution.

        Args:
            prior_images: Problem screenshot first, then earlier attempt shots
            new_image: Latest screenshot of the attempt
            language: Programming language for the revised code

        Returns:
            Decoded solution with ``revised_code`` populated

        Raises:
            SolutionClientError: On any failure
        """
        pass

    def close(self) -> None:
        """Release network resources."""
        pass
