"""Exception types raised by the learning engine.

Every failure is raised to the immediate caller; nothing in the engine
catches and suppresses these.
"""


class EngineError(Exception):
    """Base class for all learning engine errors."""


class ValidationError(EngineError, ValueError):
    """A required field is missing, blank or malformed."""


class InvalidArgumentError(ValidationError):
    """An argument is outside its allowed domain (e.g. a non-positive stride)."""


class UnknownTypeError(EngineError, LookupError):
    """No question provider is registered for the requested type tag."""

    def __init__(self, tag: str):
        super().__init__(f"No question provider registered for type '{tag}'")
        self.tag = tag


class UnknownStrategyError(EngineError, LookupError):
    """No strategy is registered under the requested name."""

    def __init__(self, name: str):
        super().__init__(f"No strategy registered under '{name}'")
        self.name = name


class ConstructionError(EngineError):
    """A provider rejected input that passed the generic checks.

    The provider's own exception, when there is one, is chained as __cause__.
    """


class PersistenceError(EngineError):
    """The storage layer failed to read or write a session."""
