"""
Matcher kinds for example expectations.

Supports:
- Equality (eq, eql, equal)
- Comparison (be < x, be <= x, be > x, be >= x)
- Type checks (be_a, be_an)
- Boolean predicates (be_<name>) and containment (have_<name>)
- Truthiness (be_truthy, be_falsey)
- Numeric tolerance (be_within(delta).of(expected))
- Raised errors (raise_error) and capability checks (respond_to)
- Custom matcher kinds via MatcherRegistry
"""

import operator
import reprlib
from abc import ABC, abstractmethod
from typing import Any, Callable, ClassVar, Dict, Iterator, List, Optional, Tuple, Type

from nestspec.errors import AssertionFailure, MatcherUsageError, NoSuchCapability

_repr = reprlib.Repr()
_repr.maxstring = 80
_repr.maxother = 80


def show(value: Any) -> str:
    """Render a value for descriptions and failure messages."""
    if isinstance(value, type):
        return value.__qualname__
    if isinstance(value, tuple) and value and all(isinstance(v, type) for v in value):
        return " or ".join(v.__qualname__ for v in value)
    return _repr.repr(value)


class Matcher(ABC):
    """
    A single check applied to an expectation's target.

    Subclasses list the names they answer to in ``names`` (or override
    ``recognizes``) and implement both polarities independently.
    """

    names: ClassVar[Tuple[str, ...]] = ()

    def __init__(self, name: str):
        self.name = name
        self.negative = False

    @classmethod
    def recognizes(cls, name: str) -> bool:
        return name in cls.names

    @abstractmethod
    def match(self, subject: Any) -> None:
        """Raise AssertionFailure unless the check holds for ``subject``."""

    @abstractmethod
    def match_not(self, subject: Any) -> None:
        """Raise AssertionFailure if the check holds for ``subject``."""

    @abstractmethod
    def phrase(self) -> str:
        """Affirmative description without the leading 'to'."""

    def describe(self) -> str:
        if self.negative:
            return f"to not {self.phrase()}"
        return f"to {self.phrase()}"

    def fail(self, message: str) -> None:
        raise AssertionFailure(message)


class TypeMatcher(Matcher):
    names = ("be_a", "be_an")

    def __init__(self, name: str, expected_type: Any):
        super().__init__(name)
        self.expected_type = expected_type
        self.article = "an" if name.endswith("an") else "a"

    def match(self, subject: Any) -> None:
        if not isinstance(subject, self.expected_type):
            self.fail(f"{show(subject)} is not {self.article} {show(self.expected_type)}")

    def match_not(self, subject: Any) -> None:
        self.negative = True
        if isinstance(subject, self.expected_type):
            self.fail(f"{show(subject)} is {self.article} {show(self.expected_type)}")

    def phrase(self) -> str:
        return f"be {self.article} {show(self.expected_type)}"


class ComparisonMatcher(Matcher):
    """Built from ``be`` followed by a comparison operator: ``be < 10``."""

    names = ("be",)

    OPERATORS: ClassVar[Dict[str, Callable[[Any, Any], bool]]] = {
        "<": operator.lt,
        "<=": operator.le,
        ">": operator.gt,
        ">=": operator.ge,
    }

    def __init__(self, name: str):
        super().__init__(name)
        self.symbol: Optional[str] = None
        self.expected: Any = None

    def _compare(self, symbol: str, expected: Any) -> "ComparisonMatcher":
        self.symbol = symbol
        self.expected = expected
        return self

    def __lt__(self, other):
        return self._compare("<", other)

    def __le__(self, other):
        return self._compare("<=", other)

    def __gt__(self, other):
        return self._compare(">", other)

    def __ge__(self, other):
        return self._compare(">=", other)

    def _holds(self, subject: Any) -> bool:
        if self.symbol is None:
            raise MatcherUsageError("'be' needs a comparison, e.g. be < 10")
        return bool(self.OPERATORS[self.symbol](subject, self.expected))

    def match(self, subject: Any) -> None:
        if not self._holds(subject):
            self.fail(f"{show(subject)} is not {self.symbol} {show(self.expected)}")

    def match_not(self, subject: Any) -> None:
        self.negative = True
        if self._holds(subject):
            self.fail(f"{show(subject)} is {self.symbol} {show(self.expected)}")

    def phrase(self) -> str:
        if self.symbol is None:
            return "be"
        return f"be {self.symbol} {show(self.expected)}"


class EqualityMatcher(Matcher):
    names = ("eq", "eql", "equal")

    def __init__(self, name: str, expected: Any):
        super().__init__(name)
        self.expected = expected

    def match(self, subject: Any) -> None:
        if subject != self.expected:
            self.fail(f"{show(subject)} is not equal to {show(self.expected)}")

    def match_not(self, subject: Any) -> None:
        self.negative = True
        if subject == self.expected:
            self.fail(f"{show(subject)} is equal to {show(self.expected)}")

    def phrase(self) -> str:
        return f"be equal to {show(self.expected)}"


class ContainmentMatcher(Matcher):
    """``have_<name>(arg)`` checks ``subject.has_<name>(arg)``."""

    PREFIX = "have_"

    BUILTIN_CHECKS: ClassVar[Dict[str, Callable[..., bool]]] = {
        "key": lambda subject, key: key in subject.keys(),
        "item": lambda subject, item: item in subject,
        "attr": lambda subject, attr: hasattr(subject, attr),
    }

    def __init__(self, name: str, *args: Any):
        super().__init__(name)
        self.feature = name[len(self.PREFIX):]
        self.args = args

    @classmethod
    def recognizes(cls, name: str) -> bool:
        return name.startswith(cls.PREFIX) and len(name) > len(cls.PREFIX)

    def _holds(self, subject: Any) -> bool:
        method = getattr(subject, f"has_{self.feature}", None)
        if callable(method):
            return bool(method(*self.args))
        check = self.BUILTIN_CHECKS.get(self.feature)
        if check is None:
            raise MatcherUsageError(f"{show(subject)} has no method has_{self.feature}")
        return bool(check(subject, *self.args))

    def _arguments(self) -> str:
        return " ".join(show(a) for a in self.args)

    def match(self, subject: Any) -> None:
        if not self._holds(subject):
            self.fail(f"{show(subject)} does not have {self.feature} {self._arguments()}".rstrip())

    def match_not(self, subject: Any) -> None:
        self.negative = True
        if self._holds(subject):
            self.fail(f"{show(subject)} has {self.feature} {self._arguments()}".rstrip())

    def phrase(self) -> str:
        return f"have {self.feature} {self._arguments()}".rstrip()


class FalseyMatcher(Matcher):
    names = ("be_falsey", "be_falsy")

    def match(self, subject: Any) -> None:
        if subject:
            self.fail(f"{show(subject)} is not falsey")

    def match_not(self, subject: Any) -> None:
        self.negative = True
        if not subject:
            self.fail(f"{show(subject)} is falsey")

    def phrase(self) -> str:
        return "be falsey"


class RaiseMatcher(Matcher):
    """Inspects an error captured by ``expect(block=...)``."""

    names = ("raise_error",)

    def __init__(self, name: str, expected: Any = Exception, message: Optional[str] = None):
        super().__init__(name)
        self.expected = expected
        self.message = message

    def match(self, subject: Any) -> None:
        if not isinstance(subject, BaseException):
            self.fail(f"nothing was raised, got {show(subject)}")
        if not isinstance(subject, self.expected):
            self.fail(f"{type(subject).__qualname__} is not a {show(self.expected)}")
        if self.message is not None and str(subject) != self.message:
            self.fail(f'"{subject}" is not "{self.message}"')

    def match_not(self, subject: Any) -> None:
        self.negative = True
        if not isinstance(subject, BaseException):
            return
        if isinstance(subject, self.expected):
            self.fail(f"{type(subject).__qualname__} is a {show(self.expected)}")
        if self.message is not None and str(subject) == self.message:
            self.fail(f'"{subject}" is "{self.message}"')

    def phrase(self) -> str:
        text = f"raise error {show(self.expected)}"
        if self.message is not None:
            text += f", {show(self.message)}"
        return text


class RespondMatcher(Matcher):
    names = ("respond_to",)

    def __init__(self, name: str, operation: str):
        super().__init__(name)
        self.operation = operation

    def _holds(self, subject: Any) -> bool:
        return callable(getattr(subject, self.operation, None))

    def match(self, subject: Any) -> None:
        if not self._holds(subject):
            self.fail(f"{show(subject)} does not respond to {self.operation}")

    def match_not(self, subject: Any) -> None:
        self.negative = True
        if self._holds(subject):
            self.fail(f"{show(subject)} responds to {self.operation}")

    def phrase(self) -> str:
        return f"respond to {self.operation}"


class TruthyMatcher(Matcher):
    names = ("be_truthy",)

    def match(self, subject: Any) -> None:
        if not subject:
            self.fail(f"{show(subject)} is not truthy")

    def match_not(self, subject: Any) -> None:
        self.negative = True
        if subject:
            self.fail(f"{show(subject)} is truthy")

    def phrase(self) -> str:
        return "be truthy"


class WithinMatcher(Matcher):
    """``be_within(delta).of(expected)``; a difference equal to delta is within."""

    names = ("be_within",)

    def __init__(self, name: str, delta: Any):
        super().__init__(name)
        self.delta = delta
        self.expected: Any = None
        self._has_expected = False

    def of(self, expected: Any) -> "WithinMatcher":
        self.expected = expected
        self._has_expected = True
        return self

    def _difference(self, subject: Any) -> Any:
        if not self._has_expected:
            raise MatcherUsageError("be_within needs an expected value, e.g. be_within(0.1).of(1.0)")
        return abs(subject - self.expected)

    def match(self, subject: Any) -> None:
        if self._difference(subject) > self.delta:
            self.fail(f"{show(subject)} is not within {show(self.delta)} of {show(self.expected)}")

    def match_not(self, subject: Any) -> None:
        self.negative = True
        if self._difference(subject) <= self.delta:
            self.fail(f"{show(subject)} is within {show(self.delta)} of {show(self.expected)}")

    def phrase(self) -> str:
        return f"be within {show(self.delta)} of {show(self.expected)}"


class PredicateMatcher(Matcher):
    """``be_<name>`` checks ``subject.is_<name>()`` or a boolean ``subject.<name>``."""

    PREFIX = "be_"

    BUILTIN_PREDICATES: ClassVar[Dict[str, Callable[..., bool]]] = {
        "empty": lambda subject: len(subject) == 0,
        "none": lambda subject: subject is None,
    }

    def __init__(self, name: str, *args: Any):
        super().__init__(name)
        self.predicate = name[len(self.PREFIX):]
        self.args = args

    @classmethod
    def recognizes(cls, name: str) -> bool:
        return name.startswith(cls.PREFIX) and len(name) > len(cls.PREFIX)

    def _holds(self, subject: Any) -> bool:
        predicate = getattr(subject, f"is_{self.predicate}", None)
        if predicate is not None:
            return bool(predicate(*self.args) if callable(predicate) else predicate)
        # A plain attribute counts only when it holds a bool.
        flag = getattr(subject, self.predicate, None)
        if isinstance(flag, bool) and not self.args:
            return flag
        check = self.BUILTIN_PREDICATES.get(self.predicate)
        if check is None:
            raise MatcherUsageError(f"{show(subject)} has no predicate is_{self.predicate}")
        return bool(check(subject, *self.args))

    def match(self, subject: Any) -> None:
        if not self._holds(subject):
            self.fail(f"{show(subject)} is not {self.predicate}")

    def match_not(self, subject: Any) -> None:
        self.negative = True
        if self._holds(subject):
            self.fail(f"{show(subject)} is {self.predicate}")

    def phrase(self) -> str:
        return f"be {self.predicate}"


# Resolution order; the be_<name> catch-all must stay last.
DEFAULT_MATCHERS: Tuple[Type[Matcher], ...] = (
    TypeMatcher,
    ComparisonMatcher,
    EqualityMatcher,
    ContainmentMatcher,
    FalseyMatcher,
    RaiseMatcher,
    RespondMatcher,
    TruthyMatcher,
    WithinMatcher,
    PredicateMatcher,
)


class MatcherBuilder:
    """
    Deferred constructor for a recognised matcher name.

    Calling it builds the matcher with the call's arguments. Comparison
    operators build a zero-argument matcher first, which is how ``be < 10``
    works.
    """

    def __init__(self, kind: Type[Matcher], name: str):
        self.kind = kind
        self.name = name

    def __call__(self, *args: Any, **kwargs: Any) -> Matcher:
        return self.kind(self.name, *args, **kwargs)

    def __lt__(self, other):
        return self() < other

    def __le__(self, other):
        return self() <= other

    def __gt__(self, other):
        return self() > other

    def __ge__(self, other):
        return self() >= other

    def __repr__(self) -> str:
        return f"<{self.kind.__name__} builder '{self.name}'>"


class MatcherRegistry:
    """
    Ordered registry of matcher kinds.

    Lookup walks the kinds in order and the first kind recognising the name
    wins.
    """

    def __init__(self, kinds: Optional[List[Type[Matcher]]] = None):
        self._kinds: List[Type[Matcher]] = list(DEFAULT_MATCHERS if kinds is None else kinds)

    def __iter__(self) -> Iterator[Type[Matcher]]:
        return iter(self._kinds)

    def __len__(self) -> int:
        return len(self._kinds)

    def register(self, kind: Type[Matcher], index: Optional[int] = None) -> Type[Matcher]:
        """Add a matcher kind, appended unless ``index`` is given."""
        if not (isinstance(kind, type) and issubclass(kind, Matcher)):
            raise TypeError(f"{kind!r} is not a Matcher subclass")
        if index is None:
            self._kinds.append(kind)
        else:
            self._kinds.insert(index, kind)
        return kind

    def register_custom(
        self,
        name: str,
        check: Callable[..., bool],
        description: Optional[str] = None,
    ) -> Type[Matcher]:
        """
        Register a matcher from a plain ``check(subject, *args) -> bool``.

        Custom matchers are placed ahead of the built-in kinds so they can
        claim names the prefix matchers would otherwise take.
        """
        label = description or name.replace("_", " ")

        class CustomMatcher(Matcher):
            names = (name,)

            def __init__(self, matcher_name: str, *args: Any):
                super().__init__(matcher_name)
                self.args = args

            def phrase(self) -> str:
                return " ".join([label] + [show(a) for a in self.args])

            def match(self, subject: Any) -> None:
                if not check(subject, *self.args):
                    self.fail(f"expected {show(subject)} to {self.phrase()}")

            def match_not(self, subject: Any) -> None:
                self.negative = True
                if check(subject, *self.args):
                    self.fail(f"expected {show(subject)} to not {self.phrase()}")

        CustomMatcher.__name__ = CustomMatcher.__qualname__ = f"CustomMatcher[{name}]"
        return self.register(CustomMatcher, index=0)

    def lookup(self, name: str) -> Optional[Type[Matcher]]:
        for kind in self._kinds:
            if kind.recognizes(name):
                return kind
        return None

    def builder(self, name: str) -> MatcherBuilder:
        kind = self.lookup(name)
        if kind is None:
            raise NoSuchCapability(name)
        return MatcherBuilder(kind, name)

    def build(self, name: str, *args: Any, **kwargs: Any) -> Matcher:
        return self.builder(name)(*args, **kwargs)

    def names(self) -> List[str]:
        """Fixed matcher names; prefix kinds contribute nothing here."""
        return sorted({n for kind in self._kinds for n in kind.names})


default_registry = MatcherRegistry()
