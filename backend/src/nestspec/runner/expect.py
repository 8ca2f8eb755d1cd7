"""Expectations bind an observed value to a matcher and a polarity."""

from typing import Any, Optional, Union

from nestspec.errors import MatcherUsageError

from .matchers import Matcher, MatcherBuilder, show


class Expect:
    def __init__(self, target: Any, is_subject_shorthand: bool = False):
        self.target = target
        self.is_subject_shorthand = is_subject_shorthand
        self.matcher: Optional[Matcher] = None
        self.negated = False
        self.evaluated = False

    def to(self, matcher: Union[Matcher, MatcherBuilder]) -> "Expect":
        self._bind(matcher).match(self.target)
        self.evaluated = True
        return self

    def not_to(self, matcher: Union[Matcher, MatcherBuilder]) -> "Expect":
        self.negated = True
        self._bind(matcher).match_not(self.target)
        self.evaluated = True
        return self

    to_not = not_to

    def _bind(self, matcher: Union[Matcher, MatcherBuilder]) -> Matcher:
        if self.matcher is not None:
            raise MatcherUsageError("an expectation can only be evaluated once")
        if isinstance(matcher, MatcherBuilder):
            matcher = matcher()
        if not isinstance(matcher, Matcher):
            raise MatcherUsageError(f"{show(matcher)} is not a matcher")
        if self.negated:
            matcher.negative = True
        self.matcher = matcher
        return matcher

    def describe(self) -> str:
        if self.is_subject_shorthand:
            text = "is expected"
        else:
            text = f"expect {show(self.target)}"
        if self.matcher is None:
            return text
        text = f"{text} {self.matcher.describe()}"
        if not self.evaluated:
            text += " FAILED"
        return text
