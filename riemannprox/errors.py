"""Exception classes for RiemannProx.

Reaching an iteration cap or any other stopping criterion is not an error; it is
reported through the criterion's reason string. The exceptions below cover
misconfiguration and out-of-range requests, and are never caught internally.
"""

from typing import Any


class RiemannProxError(Exception):
    """Base exception class for RiemannProx errors."""

    pass


class ConstructionError(RiemannProxError, ValueError):
    """Raised when a problem is built from inconsistent parts."""

    def __init__(self, message: str, expected: Any = None, actual: Any = None):
        """Initialize ConstructionError.

        Args:
            message: Error description.
            expected: The expected value, e.g. the number of proximal maps.
            actual: The value received.
        """
        super().__init__(message)
        self.expected = expected
        self.actual = actual


class ProximalMapIndexError(RiemannProxError, IndexError):
    """Raised when a proximal map is requested that the problem does not have."""

    def __init__(self, index: int, available: int):
        """Initialize ProximalMapIndexError.

        Args:
            index: The requested (0-based) index.
            available: Number of proximal maps of the problem.
        """
        super().__init__(f"The proximal map with index {index} does not exist, only {available} available.")
        self.index = index
        self.available = available


class DomainError(RiemannProxError, ValueError):
    """Raised when a curve is evaluated outside of its parameter domain."""

    def __init__(self, parameter: float, lower: float, upper: float):
        """Initialize DomainError.

        Args:
            parameter: The offending parameter.
            lower: Lower end of the domain.
            upper: Upper end of the domain.
        """
        super().__init__(f"Parameter {parameter} outside of the domain [{lower}, {upper}] of the composite Bézier curve.")
        self.parameter = parameter
        self.lower = lower
        self.upper = upper
