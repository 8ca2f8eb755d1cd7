"""
Examples are the leaves of a spec tree.

    @ctx.it("adds numbers")
    def _(e):
        e.expect(1 + 1).to(e.eq(2))

Inside the body, attributes that are not defined on the example resolve to
``let`` bindings of the enclosing contexts and then to matcher builders.
"""

import time
import weakref
from typing import TYPE_CHECKING, Any, Callable, List, Optional

import structlog

from nestspec.errors import DeclarationError, MatcherUsageError, SubjectError
from nestspec.observability import get_logger, get_tracer, record_example_outcome, setup_observability

from .expect import Expect
from .outcome import ExampleState, Outcome

if TYPE_CHECKING:
    from .context import Context

logger = get_logger("nestspec.example")

_UNSET = object()


class Example:
    __slots__ = ("_parent", "description", "body", "expects", "outcome")

    def __init__(
        self,
        parent: "Context",
        description: str = "",
        body: Optional[Callable[["Example"], Any]] = None,
    ):
        self._parent = weakref.ref(parent)
        self.description = description
        self.body = body
        self.expects: List[Expect] = []
        self.outcome = Outcome(example=self)

    @property
    def context(self) -> "Context":
        parent = self._parent()
        if parent is None:
            raise DeclarationError("example outlived its context")
        return parent

    @property
    def subject(self) -> Any:
        # An AttributeError escaping a property would be retried via __getattr__.
        context = self.context
        try:
            return context.subject()
        except AttributeError as exc:
            raise SubjectError(f"subject of '{context.label}' could not be built: {exc}") from exc

    @property
    def is_expected(self) -> Expect:
        expect = Expect(self.subject, is_subject_shorthand=True)
        self.expects.append(expect)
        return expect

    @property
    def state(self) -> ExampleState:
        return self.outcome.state

    @property
    def path(self) -> str:
        return " > ".join(self.context.labels() + [f"it {self.description}".rstrip()])

    def expect(self, target: Any = _UNSET, *, block: Optional[Callable[[], Any]] = None) -> Expect:
        """Expect a value, or the result of ``block``; an error it raises becomes the value."""
        if block is not None:
            if target is not _UNSET:
                raise MatcherUsageError("expect() takes a value or a block, not both")
            try:
                target = block()
            except Exception as exc:
                target = exc
        elif target is _UNSET:
            raise MatcherUsageError("expect() needs a value or a block")

        expect = Expect(target)
        self.expects.append(expect)
        return expect

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_") or hasattr(type(self), name):
            raise AttributeError(name)
        context = self.context
        found, value = context.lookup_binding(name)
        if found:
            return value
        return context.registry.builder(name)

    def describe(self, depth: int = 0) -> str:
        line = "  " * depth + "it " + self.description

        if not self.expects:
            return line.rstrip()
        if len(self.expects) == 1 and not self.description:
            return line + self.expects[0].describe()
        return line + "\n" + "\n".join("  " * (depth + 1) + e.describe() for e in self.expects)

    def run(self, depth: int = 0) -> Outcome:
        if self.outcome.state is not ExampleState.NOT_RUN:
            raise DeclarationError(f"example '{self.path}' has already run")

        setup_observability()
        tracer = get_tracer()
        error: Optional[BaseException] = None

        with structlog.contextvars.bound_contextvars(example=self.path):
            with tracer.start_as_current_span("spec.example") as span:
                span.set_attribute("spec.example", self.path)
                span.set_attribute("spec.depth", depth)
                started = time.perf_counter()
                try:
                    if self.body is not None:
                        self.body(self)
                except Exception as exc:
                    error = exc
                duration = time.perf_counter() - started

                self.outcome = Outcome.classify(self, error, duration)
                span.set_attribute("spec.outcome", self.outcome.state.value)

            record_example_outcome(self.outcome.state.value, duration)
            logger.debug(
                "spec.example.completed",
                outcome=self.outcome.state.value,
                duration_ms=round(duration * 1000, 3),
                expectations=len(self.expects),
            )

        return self.outcome

    def __repr__(self) -> str:
        return f"<Example {self.description!r} {self.outcome.state.value}>"
