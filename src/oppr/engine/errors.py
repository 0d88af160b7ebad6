"""Error raised by the OPPR engine."""


class ValidationError(ValueError):
    """
    Raised when an input violates an OPPR invariant.

    The engine is fail-fast: the first violated rule raises, and the message
    is meant to be shown to whoever supplied the data, e.g.
    "Tournament must have at least 3 players (got 2)".
    """
    pass
