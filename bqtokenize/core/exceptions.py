"""bqtokenize exception hierarchy.

Every failure inside a batch is raised as one of these exceptions and
converted into the error field of a response envelope by the dispatcher.
None of them is recovered locally: a single bad row fails the whole batch.
"""

from typing import Any, Dict, Optional


class BqTokenizeError(Exception):
    """Base exception for all bqtokenize errors.

    Attributes:
        message: Human-readable error description
        error_code: Machine-readable error identifier
        context: Additional error context and metadata
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self._default_error_code()
        self.context = context or {}

    def _default_error_code(self) -> str:
        """Generate default error code based on exception class name."""
        return self.__class__.__name__.upper().replace("ERROR", "_ERROR")

    @property
    def kind(self) -> str:
        """Short name of the failure kind, used in envelope messages."""
        return self.__class__.__name__

    def add_context(self, key: str, value: Any) -> None:
        """Add additional context to the error."""
        self.context[key] = value

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to structured dictionary for logging/reporting."""
        return {
            "error_type": self.kind,
            "message": self.message,
            "error_code": self.error_code,
            "context": self.context,
        }


class MalformedRowError(BqTokenizeError):
    """Raised when a row does not have the argument arity a function needs."""

    def __init__(
        self,
        message: str,
        row_index: Optional[int] = None,
        expected_arity: Optional[int] = None,
        **kwargs: Any,
    ):
        super().__init__(message, **kwargs)
        if row_index is not None:
            self.add_context("row_index", row_index)
        if expected_arity is not None:
            self.add_context("expected_arity", expected_arity)


class UnknownAlgorithmError(BqTokenizeError):
    """Raised when the algorithm tag is not in the catalog or not enabled."""

    def __init__(self, message: str, algorithm: Optional[str] = None, **kwargs: Any):
        super().__init__(message, **kwargs)
        if algorithm is not None:
            self.add_context("algorithm", algorithm)


class UnknownOperationModeError(BqTokenizeError):
    """Raised when the operation mode is neither tokenize nor reidentify."""

    def __init__(self, message: str, mode: Optional[str] = None, **kwargs: Any):
        super().__init__(message, **kwargs)
        if mode is not None:
            self.add_context("mode", mode)


class CryptoError(BqTokenizeError):
    """Raised for AES key, IV, padding, length or decoding failures."""

    def __init__(
        self,
        message: str,
        cipher_type: Optional[str] = None,
        row_index: Optional[int] = None,
        **kwargs: Any,
    ):
        super().__init__(message, **kwargs)
        if cipher_type:
            self.add_context("cipher_type", cipher_type)
        if row_index is not None:
            self.add_context("row_index", row_index)


class DecodeError(BqTokenizeError):
    """Raised when Base64 reidentify input cannot be decoded."""

    def __init__(self, message: str, row_index: Optional[int] = None, **kwargs: Any):
        super().__init__(message, **kwargs)
        if row_index is not None:
            self.add_context("row_index", row_index)


class DelegatedServiceError(BqTokenizeError):
    """Raised when the external de-identification service fails."""

    def __init__(
        self,
        message: str,
        template: Optional[str] = None,
        original_error: Optional[Exception] = None,
        **kwargs: Any,
    ):
        super().__init__(message, **kwargs)
        if template:
            self.add_context("template", template)
        if original_error is not None:
            self.add_context("original_error_type", type(original_error).__name__)


class ConfigurationError(BqTokenizeError):
    """Raised at startup when configuration is invalid or incomplete."""

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        config_file: Optional[str] = None,
        **kwargs: Any,
    ):
        super().__init__(message, **kwargs)
        if config_key:
            self.add_context("config_key", config_key)
        if config_file:
            self.add_context("config_file", config_file)
