"""Plain-text rendering of solution state for the console."""

import json
from typing import List, Optional

from core.interfaces.solution import SolutionClientError
from core.models.solution import RequestMode, RequestSnapshot, SolutionResult

RULE = "-" * 60


def format_result(result: SolutionResult, mode: RequestMode = RequestMode.ANALYZE) -> str:
    """Render a solution, skipping fields the model did not return."""
    lines: List[str] = []

    if mode == RequestMode.ANALYZE and result.problem_statement:
        lines += ["Problem", RULE, result.problem_statement, ""]

    notes_title = "What changed" if mode == RequestMode.DEBUG else "Approach"
    if result.approach_notes:
        lines += [notes_title, RULE]
        lines += [f"{i}. {note}" for i, note in enumerate(result.approach_notes, start=1)]
        lines.append("")

    code = result.display_code
    if code:
        lines += ["Revised code" if mode == RequestMode.DEBUG else "Code", RULE, code, ""]

    if result.time_complexity or result.space_complexity:
        lines += ["Complexity", RULE]
        if result.time_complexity:
            lines.append(f"Time:  {result.time_complexity}")
        if result.space_complexity:
            lines.append(f"Space: {result.space_complexity}")

    if not lines:
        return "(the model returned an empty answer)"
    return "\n".join(lines).rstrip()


def format_error(error: SolutionClientError) -> str:
    return f"Error: {error}"


def format_snapshot(snapshot: RequestSnapshot) -> Optional[str]:
    """Text for a state change, or None when there is nothing to show."""
    if snapshot.is_in_flight:
        return f"Working on {snapshot.mode.value} request..."
    if snapshot.last_error is not None:
        return format_error(snapshot.last_error)
    if snapshot.last_result is not None:
        return format_result(snapshot.last_result, snapshot.mode)
    return None


def result_to_json(result: SolutionResult) -> str:
    return json.dumps(result.to_dict(), indent=2)
