"""
Example outcomes.

An example starts NOT_RUN and moves exactly once to PASSED, FAILED or
ERRORED when it is run.
"""

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .example import Example


class ExampleState(Enum):
    NOT_RUN = "not_run"
    PASSED = "passed"
    FAILED = "failed"
    ERRORED = "errored"


@dataclass
class Outcome:
    """Result of running a single example."""
    example: "Example"
    state: ExampleState = ExampleState.NOT_RUN
    error: Optional[BaseException] = None
    duration_seconds: float = 0.0

    @classmethod
    def classify(
        cls,
        example: "Example",
        error: Optional[BaseException],
        duration_seconds: float = 0.0,
    ) -> "Outcome":
        """Assertion errors are failures; anything else raised is an error."""
        if error is None:
            state = ExampleState.PASSED
        elif isinstance(error, AssertionError):
            state = ExampleState.FAILED
        else:
            state = ExampleState.ERRORED
        return cls(example=example, state=state, error=error, duration_seconds=duration_seconds)

    @property
    def passed(self) -> bool:
        return self.state is ExampleState.PASSED
