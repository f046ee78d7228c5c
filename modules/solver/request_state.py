"""State machine for solution requests."""

import logging
from typing import Awaitable, Dict, Optional, Sequence

from core.auth.credential_manager import CredentialManager
from core.bus.event_bus import EventBus
from core.interfaces.events import Event, EventType
from core.interfaces.solution import (
    ISolutionClient,
    InvalidInputError,
    MissingCredentialError,
    SolutionClientError,
    TransportError,
)
from core.models.shot import CapturedShot
from core.models.solution import RequestMode, RequestSnapshot, SolutionResult
from modules.queue.screenshot_queue import ScreenshotQueue

logger = logging.getLogger(__name__)


class SolutionRequestState:
    """Tracks the lifecycle of solution requests.

    States run Idle -> InFlight -> Succeeded/Failed, and a new dispatch
    from either end state goes back to InFlight. At most one request is
    in flight: dispatching while one is pending is rejected and changes
    nothing. ``reset`` is allowed at any time; a request still pending
    when reset is called completes silently and its outcome is dropped.

    Every change publishes REQUEST_STATE_CHANGED with a RequestSnapshot.
    All methods must be called from the single owner event loop.
    """

    def __init__(
        self,
        client: ISolutionClient,
        queue: ScreenshotQueue,
        credentials: CredentialManager,
        event_bus: Optional[EventBus] = None,
        default_language: str = "python"
    ):
        """Initialize the request state.

        Args:
            client: Client used to reach the model provider
            queue: Queue read by ``regenerate``; never mutated here
            credentials: Store checked for an API key before dispatch
            event_bus: Bus for change notifications (None = no notifications)
            default_language: Language used when a call passes none
        """
        self._client = client
        self._queue = queue
        self._credentials = credentials
        self._event_bus = event_bus
        self._default_language = default_language

        self._in_flight = False
        self._mode = RequestMode.ANALYZE
        self._results: Dict[RequestMode, SolutionResult] = {}
        self._last_error: Optional[SolutionClientError] = None
        self._generation = 0

    @property
    def is_in_flight(self) -> bool:
        return self._in_flight

    @property
    def mode(self) -> RequestMode:
        return self._mode

    @property
    def last_result(self) -> Optional[SolutionResult]:
        """Last successful result for the current mode."""
        return self._results.get(self._mode)

    @property
    def last_error(self) -> Optional[SolutionClientError]:
        return self._last_error

    def result_for(self, mode: RequestMode) -> Optional[SolutionResult]:
        return self._results.get(mode)

    def snapshot(self) -> RequestSnapshot:
        return RequestSnapshot(
            is_in_flight=self._in_flight,
            mode=self._mode,
            last_result=self.last_result,
            last_error=self._last_error,
        )

    async def process(
        self,
        shots: Sequence[CapturedShot],
        language: Optional[str] = None
    ) -> bool:
        """Analyze the first of ``shots``.

        Args:
            shots: Queued shots; only the first is sent
            language: Solution language (None = default)

        Returns:
            True if a result was received and applied
        """
        language = language or self._default_language
        if not self._can_dispatch(shots, "No screenshots to process"):
            return False

        generation = self._begin(RequestMode.ANALYZE)
        return await self._complete(
            generation,
            RequestMode.ANALYZE,
            self._client.analyze(shots[0].image, language)
        )

    async def debug_process(
        self,
        prior_shots: Sequence[CapturedShot],
        new_shots: Sequence[CapturedShot],
        language: Optional[str] = None
    ) -> bool:
        """Ask for a review of an attempted solution.

        Args:
            prior_shots: Problem screenshot first, then earlier attempt shots
            new_shots: Newer shots; only the last one is sent
            language: Language for the revised code (None = default)

        Returns:
            True if a result was received and applied
        """
        language = language or self._default_language
        if not self._can_dispatch(
            bool(prior_shots) and bool(new_shots), "Missing screenshots for debug"
        ):
            return False

        generation = self._begin(RequestMode.DEBUG)
        return await self._complete(
            generation,
            RequestMode.DEBUG,
            self._client.debug(
                [shot.image for shot in prior_shots],
                new_shots[-1].image,
                language
            )
        )

    async def regenerate(self, language: Optional[str] = None) -> bool:
        """Re-run analysis of the queue's first shot for a fresh answer.

        The queue is read at call time. Previous results of both modes are
        discarded once the request is dispatched.

        Args:
            language: Solution language (None = default)

        Returns:
            True if a result was received and applied
        """
        language = language or self._default_language
        shots = self._queue.snapshot()
        if not self._can_dispatch(shots, "No screenshots to process"):
            return False

        self._results.clear()
        generation = self._begin(RequestMode.ANALYZE)
        return await self._complete(
            generation,
            RequestMode.ANALYZE,
            self._client.analyze(shots[0].image, language)
        )

    def reset(self) -> None:
        """Return to Idle, dropping results, error and any pending outcome."""
        self._generation += 1
        self._in_flight = False
        self._mode = RequestMode.ANALYZE
        self._results.clear()
        self._last_error = None
        logger.info("Solution state reset")
        self._notify()

    def _can_dispatch(self, inputs, empty_message: str) -> bool:
        if self._in_flight:
            logger.warning("A solution request is already in flight, ignoring new request")
            return False

        if not inputs:
            self._fail_immediately(InvalidInputError(empty_message))
            return False

        if not self._credentials.has_api_key():
            self._fail_immediately(MissingCredentialError())
            return False

        return True

    def _fail_immediately(self, error: SolutionClientError) -> None:
        logger.warning(f"Solution request not sent: {error}")
        self._last_error = error
        self._notify()

    def _begin(self, mode: RequestMode) -> int:
        self._generation += 1
        self._in_flight = True
        self._mode = mode
        self._last_error = None
        logger.info(f"Dispatching {mode.value} request")
        self._notify()
        return self._generation

    async def _complete(
        self,
        generation: int,
        mode: RequestMode,
        request: Awaitable[SolutionResult]
    ) -> bool:
        result = None
        error = None
        try:
            result = await request
        except SolutionClientError as e:
            error = e
        except Exception as e:
            logger.exception(f"Unexpected failure during {mode.value} request")
            error = TransportError(f"Unexpected error: {e}")

        if generation != self._generation:
            logger.info(f"Discarding outcome of superseded {mode.value} request")
            return False

        self._in_flight = False
        if error is None:
            self._results[mode] = result
            self._last_error = None
            logger.info(f"{mode.value.capitalize()} request succeeded")
        else:
            self._last_error = error
            logger.error(f"{mode.value.capitalize()} request failed: {error}")
        self._notify()
        return error is None

    def _notify(self) -> None:
        if self._event_bus is None:
            return

        self._event_bus.publish(Event(
            type=EventType.REQUEST_STATE_CHANGED,
            data={"state": self.snapshot()},
            source="solution_request_state"
        ))
