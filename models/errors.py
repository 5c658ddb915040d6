"""Error types raised by the simulation engine."""


class ValidationError(ValueError):
    """Raised when a caller passes an input the engine cannot accept.

    The engine state is left unchanged whenever this is raised.
    """
