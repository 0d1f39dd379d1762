"""Process-wide configuration loaded once at startup.

Key material arrives as Base64 text in environment variables (or a YAML
file) and is decoded and validated here, so that invalid or missing keys
fail at startup rather than on the first AES call. The masking core never
reads the environment itself; it is handed a ``TokenizeConfig``.
"""

import binascii
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional, Union

import yaml
from pydantic import ValidationError

from ..observability.config import LoggingConfig
from .exceptions import ConfigurationError, CryptoError, UnknownAlgorithmError
from .security import (
    AES_BLOCK_SIZE,
    DEFAULT_CIPHER_TYPE,
    VALID_KEY_LENGTHS,
    CipherSpec,
    b64decode_strict,
)
from .strategies import AlgorithmKind

logger = logging.getLogger(__name__)

ALL_ALGORITHMS = frozenset(AlgorithmKind)

# Environment variable names
ENV_AES_KEY = "AES_KEY"
ENV_AES_IV = "AES_IV_PARAMETER_BASE64"
ENV_AES_CIPHER_TYPE = "AES_DEFAULT_CIPHER_TYPE"
ENV_ALGORITHMS = "BQTOKENIZE_ALGORITHMS"
ENV_LOG_LEVEL = "LOG_LEVEL"
ENV_LOG_FORMAT = "LOG_FORMAT"

# YAML keys, in the same order as the environment variables above
_FILE_KEYS = {
    "aes_key": ENV_AES_KEY,
    "aes_iv_parameter_base64": ENV_AES_IV,
    "aes_default_cipher_type": ENV_AES_CIPHER_TYPE,
    "algorithms": ENV_ALGORITHMS,
}


@dataclass(frozen=True)
class TokenizeConfig:
    """Immutable configuration shared by every call in the process.

    Attributes:
        aes_key: Raw AES key bytes (16, 24 or 32 bytes)
        aes_iv: Raw default IV bytes for IV cipher modes (16 bytes)
        default_cipher_type: Cipher type used when a call does not override it
        enabled_algorithms: Algorithms callers may select
        logging: Logging configuration
    """

    aes_key: Optional[bytes] = field(default=None, repr=False)
    aes_iv: Optional[bytes] = field(default=None, repr=False)
    default_cipher_type: str = DEFAULT_CIPHER_TYPE
    enabled_algorithms: frozenset = ALL_ALGORITHMS
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        object.__setattr__(self, "enabled_algorithms", frozenset(self.enabled_algorithms))
        self._validate_cipher_type()
        self._validate_key_material()

        logger.debug(
            f"TokenizeConfig initialized: algorithms={sorted(self.algorithm_names)}, "
            f"default_cipher_type={self.default_cipher_type}"
        )

    def _validate_cipher_type(self) -> None:
        try:
            spec = CipherSpec.parse(self.default_cipher_type)
        except CryptoError as e:
            raise ConfigurationError(e.message, config_key=ENV_AES_CIPHER_TYPE) from e
        object.__setattr__(self, "default_cipher_type", str(spec))

    def _validate_key_material(self) -> None:
        if self.aes_key is not None and len(self.aes_key) not in VALID_KEY_LENGTHS:
            raise ConfigurationError(
                f"AES key must be 16, 24, or 32 bytes, got {len(self.aes_key)}",
                config_key=ENV_AES_KEY,
            )
        if self.aes_iv is not None and len(self.aes_iv) != AES_BLOCK_SIZE:
            raise ConfigurationError(
                f"AES IV must be {AES_BLOCK_SIZE} bytes, got {len(self.aes_iv)}",
                config_key=ENV_AES_IV,
            )

        if AlgorithmKind.AES in self.enabled_algorithms:
            if self.aes_key is None:
                raise ConfigurationError(
                    f"AES is enabled but {ENV_AES_KEY} is not set", config_key=ENV_AES_KEY
                )
            if self.aes_iv is None:
                raise ConfigurationError(
                    f"AES is enabled but {ENV_AES_IV} is not set", config_key=ENV_AES_IV
                )

    @property
    def algorithm_names(self) -> set[str]:
        return {kind.value for kind in self.enabled_algorithms}

    def is_enabled(self, algorithm: AlgorithmKind) -> bool:
        return algorithm in self.enabled_algorithms

    @classmethod
    def from_environment(cls, environ: Optional[Mapping[str, str]] = None) -> "TokenizeConfig":
        """Load configuration from environment variables.

        Environment Variables:
            AES_KEY: Base64 AES key (required when AES is enabled)
            AES_IV_PARAMETER_BASE64: Base64 default IV (required when AES is enabled)
            AES_DEFAULT_CIPHER_TYPE: Default cipher type (AES/CBC/PKCS5PADDING)
            BQTOKENIZE_ALGORITHMS: Comma separated enabled algorithms (all)
            LOG_LEVEL: Log level (INFO)
            LOG_FORMAT: Log format, json or text (json)

        Raises:
            ConfigurationError: If any value is invalid
        """
        if environ is None:
            environ = os.environ
        settings = {
            name: environ[name]
            for name in (*_FILE_KEYS.values(), ENV_LOG_LEVEL, ENV_LOG_FORMAT)
            if environ.get(name)
        }
        config = cls._from_settings(settings)
        logger.info(f"Loaded configuration from environment: {config}")
        return config

    @classmethod
    def from_file(
        cls,
        config_path: Union[str, Path],
        environ: Optional[Mapping[str, str]] = None,
    ) -> "TokenizeConfig":
        """Load configuration from a YAML file; set environment variables win."""
        config_path = Path(config_path)
        if not config_path.exists():
            raise ConfigurationError(
                f"Configuration file not found: {config_path}", config_file=str(config_path)
            )

        with open(config_path) as f:
            try:
                data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigurationError(
                    f"Invalid YAML in configuration file: {e}", config_file=str(config_path)
                ) from e

        if not isinstance(data, dict):
            raise ConfigurationError(
                "Configuration file must contain a mapping", config_file=str(config_path)
            )

        settings: dict[str, Any] = {}
        for file_key, env_name in _FILE_KEYS.items():
            if data.get(file_key) is not None:
                settings[env_name] = data[file_key]
        log_section = data.get("logging") or {}
        if log_section.get("level"):
            settings[ENV_LOG_LEVEL] = log_section["level"]
        if log_section.get("format"):
            settings[ENV_LOG_FORMAT] = log_section["format"]

        if environ is None:
            environ = os.environ
        for env_name in (*_FILE_KEYS.values(), ENV_LOG_LEVEL, ENV_LOG_FORMAT):
            if environ.get(env_name):
                settings[env_name] = environ[env_name]

        config = cls._from_settings(settings)
        logger.info(f"Loaded configuration from {config_path}: {config}")
        return config

    @classmethod
    def _from_settings(cls, settings: Mapping[str, Any]) -> "TokenizeConfig":
        try:
            logging_config = LoggingConfig(
                level=settings.get(ENV_LOG_LEVEL, "INFO"),
                format=settings.get(ENV_LOG_FORMAT, "json"),
            )
        except ValidationError as e:
            raise ConfigurationError(f"Invalid logging configuration: {e}") from e

        return cls(
            aes_key=_decode_key_material(settings.get(ENV_AES_KEY), ENV_AES_KEY),
            aes_iv=_decode_key_material(settings.get(ENV_AES_IV), ENV_AES_IV),
            default_cipher_type=settings.get(ENV_AES_CIPHER_TYPE, DEFAULT_CIPHER_TYPE),
            enabled_algorithms=_parse_algorithms(settings.get(ENV_ALGORITHMS)),
            logging=logging_config,
        )


def _decode_key_material(value: Optional[str], name: str) -> Optional[bytes]:
    if value is None:
        return None
    try:
        return b64decode_strict(str(value).strip())
    except (binascii.Error, ValueError) as e:
        raise ConfigurationError(f"{name} is not valid Base64", config_key=name) from e


def _parse_algorithms(value: Union[None, str, Iterable[str]]) -> frozenset:
    if value is None:
        return ALL_ALGORITHMS
    tags = value.split(",") if isinstance(value, str) else list(value)
    try:
        return frozenset(AlgorithmKind.parse(str(tag)) for tag in tags if str(tag).strip())
    except UnknownAlgorithmError as e:
        raise ConfigurationError(e.message, config_key=ENV_ALGORITHMS) from e


# Global configuration instance - loaded lazily to support testing
_config: Optional[TokenizeConfig] = None


def get_config() -> TokenizeConfig:
    """Get the global configuration, creating it from the environment if needed."""
    global _config
    if _config is None:
        _config = TokenizeConfig.from_environment()
    return _config


def set_config(config: TokenizeConfig) -> None:
    """Install a configuration as the global one."""
    global _config
    _config = config


def reset_config() -> None:
    """Reset the global configuration for testing purposes."""
    global _config
    _config = None
