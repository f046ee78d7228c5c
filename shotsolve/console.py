"""Interactive console front end.

Stands in for the hotkey-driven overlay: each command is one UI trigger
mapped onto the queue, capture controller or request state. Requests run
as background tasks so capturing and queue edits stay responsive, and
results are printed as REQUEST_STATE_CHANGED events arrive.
"""

import asyncio
import logging
import shlex
from typing import Awaitable, Callable, Dict, List, Optional, Set

from core.interfaces.events import Event, EventType
from shotsolve.app import ShotSolveApp
from shotsolve.formatting import format_snapshot

logger = logging.getLogger(__name__)

HELP_TEXT = """\
Commands:
  capture            capture the screen into the queue
  list               show queued screenshots
  remove N           remove screenshot N (1 = oldest)
  clear              remove all screenshots
  save N PATH        save screenshot N as PNG
  process            solve the problem in the first screenshot
  regenerate         ask again for a fresh solution
  debug              review the attempt in the last screenshot
  reset              clear the current solution and error
  language [NAME]    show or change the solution language
  status             show request state
  help               show this text
  quit               exit"""


class InteractiveConsole:
    """Read-eval loop over the application's core operations."""

    PROMPT = "shotsolve> "

    def __init__(self, app: ShotSolveApp, language: Optional[str] = None, output=print):
        self._app = app
        self._language = language or app.config.solver.default_language
        self._output = output
        self._tasks: Set[asyncio.Task] = set()
        self._running = False

        self._commands: Dict[str, Callable[[List[str]], Optional[Awaitable[None]]]] = {
            "capture": self._cmd_capture,
            "list": self._cmd_list,
            "remove": self._cmd_remove,
            "clear": self._cmd_clear,
            "save": self._cmd_save,
            "process": self._cmd_process,
            "regenerate": self._cmd_regenerate,
            "debug": self._cmd_debug,
            "reset": self._cmd_reset,
            "language": self._cmd_language,
            "status": self._cmd_status,
            "help": self._cmd_help,
            "quit": self._cmd_quit,
            "exit": self._cmd_quit,
        }

    @property
    def language(self) -> str:
        return self._language

    async def run(self) -> None:
        """Read commands from stdin until quit or end of input."""
        bus = self._app.event_bus
        bus.subscribe(EventType.REQUEST_STATE_CHANGED, self._on_state_changed)
        bus.subscribe(EventType.CAPTURE_FAILED, self._on_capture_failed)

        loop = asyncio.get_running_loop()
        self._running = True
        self._output("ShotSolve interactive mode. Type 'help' for commands.")
        try:
            while self._running:
                try:
                    line = await loop.run_in_executor(None, input, self.PROMPT)
                except EOFError:
                    break
                await self.execute(line)
        finally:
            bus.unsubscribe(EventType.REQUEST_STATE_CHANGED, self._on_state_changed)
            bus.unsubscribe(EventType.CAPTURE_FAILED, self._on_capture_failed)
            await self._cancel_pending()

    async def execute(self, line: str) -> None:
        """Run one command line."""
        try:
            parts = shlex.split(line)
        except ValueError as e:
            self._output(f"Could not parse command: {e}")
            return
        if not parts:
            return

        name, args = parts[0].lower(), parts[1:]
        handler = self._commands.get(name)
        if handler is None:
            self._output(f"Unknown command '{name}'. Type 'help' for commands.")
            return

        pending = handler(args)
        if pending is not None:
            await pending

    async def wait_idle(self) -> None:
        """Wait for every background request to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    async def _cmd_capture(self, args: List[str]) -> None:
        shot = await self._app.capture_controller.capture()
        if shot is not None:
            self._output(f"Captured screenshot {len(self._app.queue)}/{self._app.queue.max_size}")

    def _cmd_list(self, args: List[str]) -> None:
        shots = self._app.queue.snapshot()
        if not shots:
            self._output("Queue is empty")
            return
        for i, shot in enumerate(shots, start=1):
            self._output(f"{i}. {shot.width}x{shot.height}  {shot.shot_id}")

    def _cmd_remove(self, args: List[str]) -> None:
        index = self._parse_index(args)
        if index is None:
            return
        if not self._app.queue.remove_at(index):
            self._output(f"No screenshot {index + 1}")

    def _cmd_clear(self, args: List[str]) -> None:
        self._app.queue.clear()
        self._output("Queue cleared")

    def _cmd_save(self, args: List[str]) -> None:
        if len(args) != 2:
            self._output("Usage: save N PATH")
            return
        index = self._parse_index(args[:1])
        if index is None:
            return
        shots = self._app.queue.snapshot()
        if index >= len(shots):
            self._output(f"No screenshot {index + 1}")
            return
        try:
            path = shots[index].save_png(args[1])
        except OSError as e:
            self._output(f"Could not save screenshot: {e}")
            return
        self._output(f"Saved {path}")

    def _cmd_process(self, args: List[str]) -> None:
        state = self._app.request_state
        self._spawn(state.process(self._app.queue.snapshot(), self._language))

    def _cmd_regenerate(self, args: List[str]) -> None:
        self._spawn(self._app.request_state.regenerate(self._language))

    def _cmd_debug(self, args: List[str]) -> None:
        shots = self._app.queue.snapshot()
        state = self._app.request_state
        # Problem and earlier attempt shots first, newest shot last
        self._spawn(state.debug_process(shots[:-1], shots[-1:], self._language))

    def _cmd_reset(self, args: List[str]) -> None:
        self._app.request_state.reset()
        self._output("State reset")

    def _cmd_language(self, args: List[str]) -> None:
        if not args:
            self._output(f"Language: {self._language} (available: {', '.join(self._app.languages)})")
            return
        language = args[0].lower()
        if language not in self._app.languages:
            self._output(f"Unsupported language '{language}'. Choose from: {', '.join(self._app.languages)}")
            return
        self._language = language
        self._output(f"Language set to {language}")

    def _cmd_status(self, args: List[str]) -> None:
        state = self._app.request_state
        self._output(
            f"Mode: {state.mode.value}  In flight: {'yes' if state.is_in_flight else 'no'}  "
            f"Queue: {len(self._app.queue)}/{self._app.queue.max_size}  Language: {self._language}"
        )
        if state.last_error is not None:
            self._output(f"Last error: {state.last_error}")

    def _cmd_help(self, args: List[str]) -> None:
        self._output(HELP_TEXT)

    def _cmd_quit(self, args: List[str]) -> None:
        self._running = False

    def _parse_index(self, args: List[str]) -> Optional[int]:
        if len(args) != 1 or not args[0].isdigit():
            self._output("Expected a screenshot number (1 = oldest)")
            return None
        return int(args[0]) - 1

    def _spawn(self, request: Awaitable[bool]) -> None:
        if self._app.request_state.is_in_flight:
            request.close()
            self._output("A request is already running")
            return
        task = asyncio.ensure_future(request)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _cancel_pending(self) -> None:
        for task in list(self._tasks):
            task.cancel()
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)

    def _on_state_changed(self, event: Event) -> None:
        text = format_snapshot(event.data["state"])
        if text:
            self._output(text)

    def _on_capture_failed(self, event: Event) -> None:
        self._output(f"Capture failed: {event.data.get('error')}")
