"""Exception and warning types raised by smoothkit."""

from __future__ import annotations

__all__ = ["InvalidInputError", "NonConvergenceWarning"]


class InvalidInputError(ValueError):
    """Raised when an argument has the wrong shape, value or type.

    Validation happens before any computation starts, so no partial result
    is ever returned alongside this error.
    """


class NonConvergenceWarning(RuntimeWarning):
    """Emitted when STL stops before its convergence criteria are met.

    The decomposition is still returned. Running the decomposition with
    ``robust=True`` or more outer iterations usually helps.
    """
