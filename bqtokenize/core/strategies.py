"""Algorithm selection for tokenize/reidentify calls."""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Mapping, Optional

from .exceptions import UnknownAlgorithmError, UnknownOperationModeError

# Keys of the BigQuery userDefinedContext map
MODE_KEY = "mode"
ALGORITHM_KEY = "algo"
AES_CIPHER_TYPE_KEY = "aes-cipher-type"
AES_IV_PARAMETER_KEY = "aes-iv-parameter-base64"
DLP_TEMPLATE_KEY = "dlp-deid-template"


class AlgorithmKind(Enum):
    """Masking algorithms available to a remote function call."""

    IDENTITY = "identity"
    BASE64 = "base64"
    AES = "aes"
    DLP = "dlp"

    @classmethod
    def parse(cls, tag: Optional[str]) -> "AlgorithmKind":
        """Resolve an algorithm tag, case insensitively.

        ``delegated-service`` is accepted as an alias for ``dlp``.
        """
        if tag is None:
            raise UnknownAlgorithmError("No algorithm specified", algorithm=None)

        normalized = tag.strip().lower()
        if normalized == "delegated-service":
            return cls.DLP
        for kind in cls:
            if kind.value == normalized:
                return kind

        valid = sorted(kind.value for kind in cls)
        raise UnknownAlgorithmError(
            f"Unknown algorithm '{tag}', must be one of: {valid}", algorithm=tag
        )


class OperationMode(Enum):
    """Which half of a strategy's symmetric pair runs."""

    TOKENIZE = "tokenize"
    REIDENTIFY = "reidentify"

    @classmethod
    def parse(cls, mode: Optional[str]) -> "OperationMode":
        """Resolve an operation mode string, case insensitively."""
        if mode is None:
            raise UnknownOperationModeError("No operation mode specified")

        normalized = mode.strip().lower()
        for candidate in cls:
            if candidate.value == normalized:
                return candidate

        raise UnknownOperationModeError(
            f"Unknown operation mode '{mode}', must be 'tokenize' or 'reidentify'",
            mode=mode,
        )


@dataclass(frozen=True)
class AlgorithmSelector:
    """
    The algorithm tag of a call together with its algorithm-specific options.

    Attributes:
        algorithm: Which masking algorithm to run
        aes_cipher_type: Optional cipher-type override, e.g. ``AES/ECB/PKCS5PADDING``
        aes_iv_parameter_base64: Optional Base64 IV override for IV modes
        dlp_template: Template resource name for the de-identification service

    Examples:
        >>> AlgorithmSelector(AlgorithmKind.BASE64)

        >>> AlgorithmSelector.from_context(
        ...     {"mode": "tokenize", "algo": "aes", "aes-cipher-type": "AES/ECB/PKCS5PADDING"}
        ... )
    """

    algorithm: AlgorithmKind
    aes_cipher_type: Optional[str] = None
    aes_iv_parameter_base64: Optional[str] = None
    dlp_template: Optional[str] = None

    def __post_init__(self) -> None:
        """Normalize empty option strings to None."""
        for name in ("aes_cipher_type", "aes_iv_parameter_base64", "dlp_template"):
            value = getattr(self, name)
            if value is not None and not value.strip():
                object.__setattr__(self, name, None)

    @classmethod
    def from_context(cls, context: Mapping[str, str]) -> "AlgorithmSelector":
        """Build a selector from a userDefinedContext map."""
        return cls(
            algorithm=AlgorithmKind.parse(context.get(ALGORITHM_KEY)),
            aes_cipher_type=context.get(AES_CIPHER_TYPE_KEY),
            aes_iv_parameter_base64=context.get(AES_IV_PARAMETER_KEY),
            dlp_template=context.get(DLP_TEMPLATE_KEY),
        )

    def with_options(self, **options: Optional[str]) -> "AlgorithmSelector":
        """Create a new selector with updated options."""
        return replace(self, **options)


IDENTITY = AlgorithmSelector(AlgorithmKind.IDENTITY)
BASE64 = AlgorithmSelector(AlgorithmKind.BASE64)
AES_CBC = AlgorithmSelector(AlgorithmKind.AES)
AES_ECB = AlgorithmSelector(AlgorithmKind.AES, aes_cipher_type="AES/ECB/PKCS5PADDING")
