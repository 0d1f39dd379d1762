"""AES encryption of UTF-8 text, emitted as Base64 ciphertext."""

import binascii
from collections.abc import Sequence

from ..core.config import TokenizeConfig
from ..core.exceptions import CryptoError
from ..core.security import (
    AesCipher,
    CipherSpec,
    b64decode_strict,
    b64encode_str,
    decode_iv,
)
from ..core.strategies import AlgorithmSelector


class AesFn:
    """
    Deterministic AES tokenization.

    The same key, cipher type, IV and plaintext always produce the same
    token, and reidentify is the exact inverse of tokenize.
    """

    def __init__(self, cipher: AesCipher):
        self.cipher = cipher

    @classmethod
    def create(cls, config: TokenizeConfig, selector: AlgorithmSelector) -> "AesFn":
        """
        Build the function for one call.

        The cipher type comes from the call if it sets one, otherwise from
        the configured default. The IV is only resolved for modes that need
        one: the call's IV if it sets one, otherwise the configured IV.
        """
        if config.aes_key is None:
            raise CryptoError("AES key is not configured")

        spec = CipherSpec.parse(selector.aes_cipher_type or config.default_cipher_type)
        iv = None
        if spec.requires_iv:
            if selector.aes_iv_parameter_base64:
                iv = decode_iv(selector.aes_iv_parameter_base64)
            else:
                iv = config.aes_iv
        return cls(AesCipher(config.aes_key, spec, iv))

    def tokenize(self, values: Sequence[str]) -> list[str]:
        results = []
        for index, value in enumerate(values):
            try:
                ciphertext = self.cipher.encrypt(value.encode("utf-8"))
            except CryptoError as e:
                e.add_context("row_index", index)
                raise
            results.append(b64encode_str(ciphertext))
        return results

    def reidentify(self, values: Sequence[str]) -> list[str]:
        results = []
        for index, value in enumerate(values):
            try:
                ciphertext = b64decode_strict(value)
            except (binascii.Error, ValueError) as e:
                raise CryptoError(
                    f"Row {index} is not valid Base64 ciphertext",
                    cipher_type=str(self.cipher.spec),
                    row_index=index,
                ) from e

            try:
                plaintext = self.cipher.decrypt(ciphertext)
            except CryptoError as e:
                e.add_context("row_index", index)
                raise

            try:
                results.append(plaintext.decode("utf-8"))
            except UnicodeDecodeError as e:
                raise CryptoError(
                    f"Row {index} does not decrypt to UTF-8 text",
                    cipher_type=str(self.cipher.spec),
                    row_index=index,
                ) from e
        return results

    def __repr__(self) -> str:
        return f"AesFn({self.cipher.spec})"
