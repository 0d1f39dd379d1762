"""Masking functions: identity, Base64, AES and DLP delegation."""

from .aes import AesFn
from .base import TokenizeFn, UnaryStringArgFn, unary_string_args
from .base64_fn import Base64Fn
from .dlp import DeidentificationService, DlpDeidentificationService, DlpFn
from .factory import TokenizeFnFactory
from .identity import IdentityFn

__all__ = [
    "AesFn",
    "Base64Fn",
    "DeidentificationService",
    "DlpDeidentificationService",
    "DlpFn",
    "IdentityFn",
    "TokenizeFn",
    "TokenizeFnFactory",
    "UnaryStringArgFn",
    "unary_string_args",
]
