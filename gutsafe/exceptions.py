"""Exception types raised by the GutSafe core."""


class GutSafeError(Exception):
    """Base class for all GutSafe errors."""


class ValidationError(GutSafeError, ValueError):
    """Raised when a FoodItem, GutProfile or LearningData payload is malformed."""


class NotInitializedError(GutSafeError, RuntimeError):
    """Raised when the learning engine is queried before initialize()."""
