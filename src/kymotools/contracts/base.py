"""Base contract enforcement utilities.

require() is the single enforcement mechanism for stage contracts. It checks
the invariants a stage guarantees to the next one.
"""

from kymotools.contracts.failure import ContractViolation


def require(condition: bool, message: str) -> None:
    """Enforce a stage contract.

    Parameters
    ----------
    condition : bool
        The invariant that must be true. If False, ContractViolation is raised.

    message : str
        Error message explaining the contract violation (for debugging).

    Raises
    ------
    ContractViolation
        If condition is False. This indicates a bug in builder logic.

    Examples
    --------
    >>> require(volume.has_axis(Axis.TIME), "Volume contract: missing 'time' axis")
    """
    if not condition:
        raise ContractViolation(message)
