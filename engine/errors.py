"""Error taxonomy for the hold'em engine.

The controller recovers from every one of these locally (refund, auto-fold or
ignore) and reports what happened through the snapshot message.
"""


class EngineError(Exception):
    """Base class for engine failures."""


class ConstructionError(EngineError):
    """The deck did not build to 52 unique cards."""


class EmptyDeckError(EngineError):
    """A deal was requested with too few cards left."""


class InvalidActionError(EngineError):
    """An action that is illegal in the current betting state."""
