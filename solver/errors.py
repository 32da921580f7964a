# solver/errors.py


class InvariantViolation(AssertionError):
    """Raised when piece/grid bookkeeping is broken.

    The search engine never produces these under correct candidate generation,
    so nothing in the solver catches them: a raised ``InvariantViolation`` is a
    bug report, not a search outcome.
    """


__all__ = ["InvariantViolation"]
