"""Exception taxonomy for spec declaration and execution."""


class SpecError(Exception):
    """Base class for every error raised by nestspec itself."""


class AssertionFailure(SpecError, AssertionError):
    """A matcher check did not hold. Reported as a failure."""


class MatcherUsageError(SpecError, TypeError):
    """A matcher was used in a way it cannot evaluate. Reported as an error."""


class NoSuchCapability(SpecError, AttributeError):
    """A name used inside an example resolved to neither a binding nor a matcher."""

    def __init__(self, name: str):
        super().__init__(f"undefined binding or matcher '{name}'")
        self.name = name


class SubjectError(SpecError, LookupError):
    """No subject could be resolved for a context."""


class DeclarationError(SpecError, ValueError):
    """The spec tree was declared incorrectly."""
