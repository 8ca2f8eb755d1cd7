"""
Contexts are the internal nodes of a spec tree.

A context is declared by running its body with the new node as the only
argument. The body adds nested contexts and examples, overrides the subject
and registers ``let`` bindings:

    def body(ctx):
        ctx.subject(lambda: [])
        ctx.let("limit", lambda: 3)

        @ctx.context("when empty")
        def _(inner):
            @inner.it("has nothing")
            def _(e):
                e.is_expected.to(e.be_empty)

Running the root walks the tree depth-first in declaration order and
prints the report.
"""

import inspect
import keyword
import weakref
from typing import IO, Any, Callable, Dict, List, Optional, Tuple, Union

from nestspec.config import Settings, get_settings
from nestspec.errors import DeclarationError, SubjectError
from nestspec.observability import get_logger, get_tracer, setup_observability

from .example import Example
from .matchers import MatcherRegistry, default_registry
from .outcome import Outcome
from .report import Reporter, Summary

logger = get_logger("nestspec.context")

_UNSET = object()

Node = Union["Context", Example]


def _constructible(target: Any) -> bool:
    """True when ``target`` is a concrete type that accepts a no-argument call."""
    if not isinstance(target, type) or inspect.isabstract(target):
        return False
    try:
        inspect.signature(target).bind()
    except ValueError:
        # Some builtin types expose no signature.
        return True
    except TypeError:
        return False
    return True


class Context:
    def __init__(
        self,
        target: Any,
        parent: Optional["Context"] = None,
        body: Optional[Callable[["Context"], Any]] = None,
        *,
        registry: Optional[MatcherRegistry] = None,
    ):
        self.target = target
        self._parent = weakref.ref(parent) if parent is not None else None
        self.children: List[Node] = []
        self.summary: Optional[Summary] = None
        self._registry = registry
        self._subject: Any = _UNSET
        self._subject_block: Optional[Callable[[], Any]] = None
        self._bindings: Dict[str, Callable[[], Any]] = {}
        self._binding_values: Dict[str, Any] = {}

        if body is not None:
            body(self)

    @property
    def parent(self) -> Optional["Context"]:
        return self._parent() if self._parent is not None else None

    @property
    def registry(self) -> MatcherRegistry:
        if self._registry is not None:
            return self._registry
        parent = self.parent
        return parent.registry if parent is not None else default_registry

    @property
    def label(self) -> str:
        if isinstance(self.target, type):
            return self.target.__qualname__
        return str(self.target)

    def labels(self) -> List[str]:
        parent = self.parent
        return (parent.labels() if parent is not None else []) + [self.label]

    # Declaration

    def context(self, target: Any, body: Optional[Callable[["Context"], Any]] = None):
        """Add a nested context; without ``body`` this returns a decorator."""
        if body is None:
            return lambda fn: self.context(target, fn)
        child = Context(target, self, body)
        self.children.append(child)
        return child

    def it(self, description: Any = "", body: Optional[Callable[[Example], Any]] = None):
        """Add an example; ``@ctx.it`` and ``@ctx.it("...")`` both work."""
        if callable(description) and body is None:
            description, body = "", description
        if body is None:
            return lambda fn: self.it(description, fn)
        if not isinstance(description, str):
            raise DeclarationError(f"example description must be a string, got {description!r}")
        example = Example(self, description, body)
        self.children.append(example)
        return example

    def let(self, name: Any, block: Optional[Callable[[], Any]] = None):
        """Register a lazily evaluated, memoized binding visible to examples below."""
        if callable(name) and block is None:
            name, block = name.__name__, name
        if block is None:
            return lambda fn: self.let(name, fn)
        if not isinstance(name, str) or not name.isidentifier() or keyword.iskeyword(name):
            raise DeclarationError(f"invalid binding name {name!r}")
        if name.startswith("_") or hasattr(Example, name):
            raise DeclarationError(f"binding name '{name}' is reserved")
        if not callable(block):
            raise DeclarationError(f"binding '{name}' needs a callable")

        self._bindings[name] = block
        self._binding_values.pop(name, None)
        return block

    def subject(self, block: Optional[Callable[[], Any]] = None) -> Any:
        """
        Resolve the subject, or register an explicit subject block.

        Resolution order: memoized value, explicit block, a no-argument
        instance of ``target`` when it is a constructible type, then the
        parent's subject.
        """
        if block is not None:
            if not callable(block):
                raise DeclarationError("subject() needs a callable")
            self._subject_block = block
            self._subject = _UNSET
            return block

        if self._subject is _UNSET:
            self._subject = self._resolve_subject()
        return self._subject

    def _resolve_subject(self) -> Any:
        if self._subject_block is not None:
            return self._subject_block()
        if _constructible(self.target):
            return self.target()
        parent = self.parent
        if parent is not None:
            return parent.subject()
        raise SubjectError(f"no subject for '{self.label}'; declare one with subject()")

    def lookup_binding(self, name: str) -> Tuple[bool, Any]:
        """Find ``name`` in this context or the nearest ancestor declaring it."""
        node: Optional[Context] = self
        while node is not None:
            if name in node._bindings:
                if name not in node._binding_values:
                    node._binding_values[name] = node._bindings[name]()
                return True, node._binding_values[name]
            node = node.parent
        return False, None

    # Execution

    def describe(self, depth: int = 0) -> str:
        lines = ["  " * depth + self.label]
        lines.extend(child.describe(depth + 1) for child in self.children)
        return "\n".join(lines)

    def run(
        self,
        depth: int = 0,
        *,
        out: Optional[IO[str]] = None,
        settings: Optional[Settings] = None,
    ) -> Union[bool, List[Outcome]]:
        """
        Run every example below this context in declaration order.

        Nested contexts return their flattened outcomes; the root prints the
        report and returns True when nothing failed or errored.
        """
        setup_observability()
        if depth == 0:
            logger.info("spec.run.started", context=self.label)

        outcomes: List[Outcome] = []
        with get_tracer().start_as_current_span("spec.context") as span:
            span.set_attribute("spec.context", self.label)
            span.set_attribute("spec.depth", depth)
            for child in self.children:
                result = child.run(depth + 1)
                if isinstance(result, list):
                    outcomes.extend(result)
                else:
                    outcomes.append(result)

        if depth:
            return outcomes

        settings = settings or get_settings()
        reporter = Reporter(out=out, show_tracebacks=settings.show_tracebacks)
        self.summary = reporter.report(self, outcomes)
        logger.info(
            "spec.run.completed",
            context=self.label,
            ok=self.summary.ok,
            failed=self.summary.failed,
            errors=self.summary.errors,
        )
        return self.summary.success

    def __repr__(self) -> str:
        return f"<Context {self.label!r} children={len(self.children)}>"
