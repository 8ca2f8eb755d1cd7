"""Renders the spec tree, the failure list and the summary line."""

import os
import sys
import traceback
from dataclasses import dataclass, field
from typing import IO, TYPE_CHECKING, List, Optional

from .outcome import ExampleState, Outcome

if TYPE_CHECKING:
    from .context import Context

_PACKAGE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__))) + os.sep


@dataclass
class Summary:
    """Aggregate counts for one root run."""
    ok: int = 0
    failed: int = 0
    errors: int = 0
    failures: List[Outcome] = field(default_factory=list)
    text: str = ""

    @property
    def total(self) -> int:
        return self.ok + self.failed + self.errors

    @property
    def success(self) -> bool:
        return self.failed == 0 and self.errors == 0

    def line(self) -> str:
        return f"{self.ok} ok, {self.failed} failed, {self.errors} errors."


class Reporter:
    def __init__(self, out: Optional[IO[str]] = None, show_tracebacks: bool = True):
        self.out = out
        self.show_tracebacks = show_tracebacks

    @staticmethod
    def summarize(outcomes: List[Outcome]) -> Summary:
        summary = Summary()
        for outcome in outcomes:
            if outcome.state is ExampleState.PASSED:
                summary.ok += 1
                continue
            if outcome.state is ExampleState.FAILED:
                summary.failed += 1
            else:
                summary.errors += 1
            summary.failures.append(outcome)
        return summary

    def render(self, root: "Context", summary: Summary) -> str:
        parts = [root.describe(0), ""]

        if summary.failures:
            parts.append("FAILURES:")
            parts.append("")
            parts.append("\n\n".join(
                self._format_failure(i, outcome)
                for i, outcome in enumerate(summary.failures, start=1)
            ))
            parts.append("")

        parts.append(summary.line())
        return "\n".join(parts)

    def report(self, root: "Context", outcomes: List[Outcome]) -> Summary:
        summary = self.summarize(outcomes)
        summary.text = self.render(root, summary)
        print(summary.text, file=self.out or sys.stdout)
        return summary

    def _format_failure(self, index: int, outcome: Outcome) -> str:
        error = outcome.error
        if error is None:
            headline = f"  {index}) {outcome.state.value}"
        else:
            headline = f"  {index}) {type(error).__qualname__}: {error}"

        lines = [headline, f"    in {outcome.example.path}"]
        if self.show_tracebacks and error is not None:
            lines.extend(self._trail(error))
        return "\n".join(lines)

    @staticmethod
    def _trail(error: BaseException) -> List[str]:
        frames = [
            frame for frame in traceback.extract_tb(error.__traceback__)
            if not os.path.abspath(frame.filename).startswith(_PACKAGE_DIR)
        ]
        lines = []
        for entry in traceback.StackSummary.from_list(frames).format():
            lines.extend("    " + line for line in entry.rstrip("\n").split("\n"))
        return lines
