"""bqtokenize: tokenize and reidentify BigQuery column values.

A BigQuery remote function endpoint that masks and unmasks a batch of rows
with one of a fixed set of algorithms: identity, Base64, AES, or delegation
to the Cloud DLP de-identification service.
"""

__version__ = "0.1.0"

from .core import (
    AlgorithmKind,
    AlgorithmSelector,
    BqTokenizeError,
    ConfigurationError,
    CryptoError,
    DecodeError,
    DelegatedServiceError,
    MalformedRowError,
    OperationMode,
    ResponseEnvelope,
    TokenizeConfig,
    UnknownAlgorithmError,
    UnknownOperationModeError,
)
from .dispatcher import Dispatcher
from .fns import DeidentificationService, TokenizeFn

__all__ = [
    "__version__",
    "AlgorithmKind",
    "AlgorithmSelector",
    "BqTokenizeError",
    "ConfigurationError",
    "CryptoError",
    "DecodeError",
    "DeidentificationService",
    "DelegatedServiceError",
    "Dispatcher",
    "MalformedRowError",
    "OperationMode",
    "ResponseEnvelope",
    "TokenizeConfig",
    "TokenizeFn",
    "UnknownAlgorithmError",
    "UnknownOperationModeError",
]
