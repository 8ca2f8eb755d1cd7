"""
nestspec: nested behaviour-driven specs.

    from nestspec import describe

    @describe("Stack")
    def stack_spec(ctx):
        ctx.subject(list)

        @ctx.it("starts empty")
        def _(e):
            e.is_expected.to(e.be_empty)
"""

from .dsl import SpecSession, current_session, describe, run_script
from .errors import (
    AssertionFailure,
    DeclarationError,
    MatcherUsageError,
    NoSuchCapability,
    SpecError,
    SubjectError,
)
from .runner import (
    Context,
    Example,
    ExampleState,
    Expect,
    Matcher,
    MatcherRegistry,
    Outcome,
    Summary,
    default_registry,
)

__all__ = [
    "describe",
    "run_script",
    "SpecSession",
    "current_session",
    "Context",
    "Example",
    "ExampleState",
    "Expect",
    "Matcher",
    "MatcherRegistry",
    "Outcome",
    "Summary",
    "default_registry",
    "SpecError",
    "AssertionFailure",
    "DeclarationError",
    "MatcherUsageError",
    "NoSuchCapability",
    "SubjectError",
]
