"""Base contract enforcement utilities.

The require() function is the single enforcement mechanism for all checks,
both structural grid invariants and request validation.
"""

from typing import Type

from climgrid.contracts.failure import ContractViolation


def require(condition: bool, message: str, error: Type[Exception] = ContractViolation) -> None:
    """Enforce a contract.

    It is fail-fast: no recovery, no fallback, no silence.

    Parameters
    ----------
    condition : bool
        The invariant that must be true.

    message : str
        Error message explaining the violation.

    error : type, optional
        Exception class raised when ``condition`` is False. Defaults to
        ContractViolation; request checks pass a GridError subclass.

    Raises
    ------
    ContractViolation or GridError
        If condition is False.

    Examples
    --------
    >>> require("time" in grid.dims, "Grid contract: missing 'time' dimension")
    >>> require(len(idx) > 0, "Variables not found", error=NotFoundError)
    """
    if not condition:
        raise error(message)
