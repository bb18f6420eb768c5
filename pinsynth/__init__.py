"""pinsynth - non-personal ("fake") personal identification numbers.

Generates structurally valid, checksum-correct 12-digit PINs whose birth
number lies in [880, 999], a range never assigned to real people, and
anonymizes existing PIN batches while keeping their age and sex
distribution.

Quick Start:
    import pinsynth

    batch = pinsynth.generate(10, rng=1)
    batch.non_personal          # True

    fake = pinsynth.anonymize(["191212121212", "191212121212"], rng=1)
    fake[0] == fake[1]          # True, relations are kept
"""

__version__ = "0.1.0"

# Core API
from .generator import (
    Generator,
    generate,
    anonymize,
    get_generator,
    set_generator,
)

# Codec
from .engine.codec import (
    encode,
    decode,
    decode_fields,
    is_non_personal,
)
from .engine.checksum import verify

# Types
from .types import (
    PinBatch,
    PinFields,
    Sex,
)

# Exceptions
from .errors import (
    PinsynthError,
    ConfigurationError,
    InvalidParameterError,
    InvalidRangeError,
    EstimationError,
    DecodingError,
    EncodingError,
    SamplingError,
    ExhaustionError,
)

# Configuration
from .config import (
    Config,
    get_config,
    set_config,
)

__all__ = [
    # Version
    "__version__",

    # Core API
    "Generator",
    "generate",
    "anonymize",
    "get_generator",
    "set_generator",

    # Codec
    "encode",
    "decode",
    "decode_fields",
    "is_non_personal",
    "verify",

    # Types
    "PinBatch",
    "PinFields",
    "Sex",

    # Exceptions
    "PinsynthError",
    "ConfigurationError",
    "InvalidParameterError",
    "InvalidRangeError",
    "EstimationError",
    "DecodingError",
    "EncodingError",
    "SamplingError",
    "ExhaustionError",

    # Configuration
    "Config",
    "get_config",
    "set_config",
]
