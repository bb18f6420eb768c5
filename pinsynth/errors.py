"""Exceptions raised by pinsynth.

Every public operation is all-or-nothing: internal resampling is retried
silently, and only a failure that survives its retry budget reaches the
caller as one of these.
"""


class PinsynthError(Exception):
    """Base exception for all pinsynth errors."""
    pass

class ConfigurationError(PinsynthError):
    """Configuration file or values are invalid."""
    pass

class InvalidParameterError(PinsynthError):
    """A probability, count or bound passed by the caller is invalid."""
    pass

class InvalidRangeError(InvalidParameterError):
    """Lower birthdate bound lies after the upper bound."""
    pass

class EstimationError(PinsynthError):
    """Source data is too small or degenerate to fit a distribution."""
    pass

class DecodingError(PinsynthError, ValueError):
    """Input is not a structurally valid 12-digit PIN."""
    pass

class EncodingError(PinsynthError, ValueError):
    """Fields cannot be represented as a 12-digit PIN."""
    pass

class SamplingError(PinsynthError):
    """Truncated sampling could not hit the requested bounds."""
    pass

class ExhaustionError(PinsynthError):
    """Not enough distinct non-personal numbers for the requested batch."""
    pass
