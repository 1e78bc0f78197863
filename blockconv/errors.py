"""Exception types raised by blockconv."""


class InvalidArgumentError(ValueError):
    """
    Raised when a signal, filter or block parameter violates a precondition.

    Subclasses ValueError so callers catching ValueError keep working.
    Raised before any output is computed; no partial result is returned.
    """
