# Spec tree execution engine
# Contexts, examples, expectations, matchers and the reporter

from .context import Context
from .example import Example
from .expect import Expect
from .matchers import Matcher, MatcherBuilder, MatcherRegistry, default_registry
from .outcome import ExampleState, Outcome
from .report import Reporter, Summary

__all__ = [
    "Context",
    "Example",
    "Expect",
    "Matcher",
    "MatcherBuilder",
    "MatcherRegistry",
    "default_registry",
    "ExampleState",
    "Outcome",
    "Reporter",
    "Summary",
]
