"""Core types, configuration and crypto primitives for bqtokenize."""

from .config import TokenizeConfig, get_config, reset_config, set_config
from .exceptions import (
    BqTokenizeError,
    ConfigurationError,
    CryptoError,
    DecodeError,
    DelegatedServiceError,
    MalformedRowError,
    UnknownAlgorithmError,
    UnknownOperationModeError,
)
from .results import ResponseEnvelope
from .security import DEFAULT_CIPHER_TYPE, AesCipher, CipherSpec
from .strategies import (
    AES_CBC,
    AES_ECB,
    BASE64,
    IDENTITY,
    AlgorithmKind,
    AlgorithmSelector,
    OperationMode,
)

__all__ = [
    # Configuration
    "TokenizeConfig",
    "get_config",
    "set_config",
    "reset_config",
    # Exceptions
    "BqTokenizeError",
    "ConfigurationError",
    "CryptoError",
    "DecodeError",
    "DelegatedServiceError",
    "MalformedRowError",
    "UnknownAlgorithmError",
    "UnknownOperationModeError",
    # Results
    "ResponseEnvelope",
    # Crypto
    "DEFAULT_CIPHER_TYPE",
    "AesCipher",
    "CipherSpec",
    # Selection
    "AlgorithmKind",
    "AlgorithmSelector",
    "OperationMode",
    "IDENTITY",
    "BASE64",
    "AES_CBC",
    "AES_ECB",
]
