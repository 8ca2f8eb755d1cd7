"""Top-level declaration entry point and spec sessions."""

from __future__ import annotations

import tempfile
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from pathlib import Path
from typing import IO, Any, Callable, Iterator, List, Optional

from nestspec.config import Settings
from nestspec.observability import setup_observability
from nestspec.runner import Context, MatcherRegistry

_current_session: ContextVar[Optional["SpecSession"]] = ContextVar("nestspec_session", default=None)


@dataclass
class SpecSession:
    """Collects the root contexts run while the session is active."""

    roots: List[Context] = field(default_factory=list)
    results: List[bool] = field(default_factory=list)

    def record(self, root: Context, success: bool) -> None:
        self.roots.append(root)
        self.results.append(success)

    @property
    def success(self) -> bool:
        return bool(self.results) and all(self.results)

    @contextmanager
    def activate(self) -> Iterator["SpecSession"]:
        token = _current_session.set(self)
        try:
            yield self
        finally:
            _current_session.reset(token)


def current_session() -> Optional[SpecSession]:
    return _current_session.get()


def describe(
    target: Any,
    body: Optional[Callable[[Context], Any]] = None,
    *,
    out: Optional[IO[str]] = None,
    registry: Optional[MatcherRegistry] = None,
    settings: Optional[Settings] = None,
):
    """
    Declare a root context around ``target``, run it and print the report.

    Returns True when every example passed. Without ``body`` this returns a
    decorator, so ``@describe("calculator")`` binds the decorated name to the
    result.
    """
    if body is None:
        return lambda fn: describe(target, fn, out=out, registry=registry, settings=settings)

    setup_observability()
    root = Context(target, body=body, registry=registry)
    success = root.run(out=out, settings=settings)

    session = _current_session.get()
    if session is not None:
        session.record(root, success)
    return success


def run_script(source: str, filename: str = "script_spec.py", *, out: Optional[IO[str]] = None) -> bool:
    """
    Run spec source text and report whether every ``describe`` passed.

    The source is written to ``filename`` in a temporary directory and loaded
    like any spec file, with ``describe`` predefined. A script that runs no
    ``describe`` at all counts as unsuccessful.
    """
    from nestspec.loader import load_spec_file

    session = SpecSession()

    def scripted_describe(target, body=None, **kwargs):
        kwargs.setdefault("out", out)
        return describe(target, body, **kwargs)

    with tempfile.TemporaryDirectory(prefix="nestspec-") as workdir:
        path = Path(workdir) / Path(filename).name
        path.write_text(source, encoding="utf-8")
        load_spec_file(path, session, namespace={"describe": scripted_describe})
    return session.success
