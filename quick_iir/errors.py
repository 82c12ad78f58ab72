"""
Exceptions raised while deriving block-filter constants.

Every failure here is a rejected configuration: the derivation is pure, so
the same inputs fail the same way and the fix is to change the inputs.
"""


class FilterConstantsError(ValueError):
    """Base class for all constant-derivation failures."""


class InvalidDimension(FilterConstantsError):
    """Image size, block size or unroll length is not positive."""


class UnstableFilter(FilterConstantsError):
    """A pole of the filter lies on or outside the unit circle."""


class DegenerateDiscriminant(FilterConstantsError):
    """Repeated eigenvalue: the closed-form eigen-reconstruction divides by zero."""


class DegenerateCoefficient(FilterConstantsError):
    """A feedback coefficient is zero where a derived constant divides by it."""


class ImaginaryResidual(FilterConstantsError):
    """A transfer matrix kept an imaginary part that should have cancelled."""


class NonFiniteConstant(FilterConstantsError):
    """A NaN or Inf was about to be published."""


__all__ = [
    "FilterConstantsError",
    "InvalidDimension",
    "UnstableFilter",
    "DegenerateDiscriminant",
    "DegenerateCoefficient",
    "ImaginaryResidual",
    "NonFiniteConstant",
]
