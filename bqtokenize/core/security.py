"""AES primitives for the tokenize/reidentify transforms."""

import base64
import binascii
from dataclasses import dataclass
from typing import Optional

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from .exceptions import CryptoError

# Constants for cryptographic operations
AES_BLOCK_SIZE = 16  # bytes, 128 bits for every AES key size
VALID_KEY_LENGTHS = {16, 24, 32}
DEFAULT_CIPHER_TYPE = "AES/CBC/PKCS5PADDING"
SUPPORTED_MODES = {"CBC", "ECB"}
IV_MODES = {"CBC"}
# PKCS5 and PKCS7 are the same scheme over a 16 byte block
SUPPORTED_PADDINGS = {"PKCS5PADDING", "PKCS7PADDING", "NOPADDING"}


def b64decode_strict(value: str) -> bytes:
    """
    Decode standard Base64, rejecting characters outside the alphabet.

    Raises:
        binascii.Error: If the value is not valid Base64
    """
    return base64.b64decode(value, validate=True)


def b64encode_str(data: bytes) -> str:
    """Encode bytes as standard Base64 text with padding and no line breaks."""
    return base64.b64encode(data).decode("ascii")


@dataclass(frozen=True)
class CipherSpec:
    """A parsed ``AES/<MODE>/<PADDING>`` cipher type."""

    mode: str = "CBC"
    padding: str = "PKCS5PADDING"

    def __post_init__(self) -> None:
        """Validate the mode and padding."""
        if self.mode not in SUPPORTED_MODES:
            raise CryptoError(
                f"Unsupported AES mode '{self.mode}', must be one of: {sorted(SUPPORTED_MODES)}",
                cipher_type=str(self),
            )
        if self.padding not in SUPPORTED_PADDINGS:
            raise CryptoError(
                f"Unsupported AES padding '{self.padding}', "
                f"must be one of: {sorted(SUPPORTED_PADDINGS)}",
                cipher_type=str(self),
            )

    @classmethod
    def parse(cls, cipher_type: str) -> "CipherSpec":
        """Parse a cipher type string such as ``AES/ECB/PKCS5PADDING``."""
        parts = [part.strip().upper() for part in cipher_type.split("/")]
        if len(parts) != 3 or parts[0] != "AES":
            raise CryptoError(
                f"Invalid cipher type '{cipher_type}', expected AES/<MODE>/<PADDING>",
                cipher_type=cipher_type,
            )
        return cls(mode=parts[1], padding=parts[2])

    @property
    def requires_iv(self) -> bool:
        return self.mode in IV_MODES

    @property
    def padded(self) -> bool:
        return self.padding != "NOPADDING"

    def __str__(self) -> str:
        return f"AES/{self.mode}/{self.padding}"


class AesCipher:
    """
    Deterministic AES encryption for a fixed key, cipher spec and IV.

    The IV is only used when the mode requires one; for other modes any
    supplied IV is ignored. Instances hold no per-call state and can be
    shared between threads.
    """

    def __init__(self, key: bytes, spec: CipherSpec, iv: Optional[bytes] = None):
        if len(key) not in VALID_KEY_LENGTHS:
            raise CryptoError(
                f"AES key must be 16, 24, or 32 bytes, got {len(key)}",
                cipher_type=str(spec),
            )

        if spec.requires_iv:
            if iv is None:
                raise CryptoError(
                    f"Cipher {spec} requires an IV but none was configured",
                    cipher_type=str(spec),
                )
            if len(iv) != AES_BLOCK_SIZE:
                raise CryptoError(
                    f"IV must be {AES_BLOCK_SIZE} bytes for {spec}, got {len(iv)}",
                    cipher_type=str(spec),
                )
            mode: modes.Mode = modes.CBC(iv)
        else:
            mode = modes.ECB()

        self.spec = spec
        self._cipher = Cipher(algorithms.AES(key), mode)

    def encrypt(self, plaintext: bytes) -> bytes:
        """Pad (if the padding scheme pads) and encrypt plaintext."""
        if self.spec.padded:
            padder = padding.PKCS7(AES_BLOCK_SIZE * 8).padder()
            data = padder.update(plaintext) + padder.finalize()
        elif len(plaintext) % AES_BLOCK_SIZE:
            raise CryptoError(
                f"Input length {len(plaintext)} is not a multiple of {AES_BLOCK_SIZE} "
                f"bytes and {self.spec} does not pad",
                cipher_type=str(self.spec),
            )
        else:
            data = plaintext

        encryptor = self._cipher.encryptor()
        return encryptor.update(data) + encryptor.finalize()

    def decrypt(self, ciphertext: bytes) -> bytes:
        """Decrypt ciphertext and remove padding (if the padding scheme pads)."""
        if len(ciphertext) % AES_BLOCK_SIZE or (self.spec.padded and not ciphertext):
            raise CryptoError(
                f"Ciphertext length {len(ciphertext)} is not a positive multiple "
                f"of {AES_BLOCK_SIZE} bytes",
                cipher_type=str(self.spec),
            )

        decryptor = self._cipher.decryptor()
        data = decryptor.update(ciphertext) + decryptor.finalize()
        if not self.spec.padded:
            return data

        unpadder = padding.PKCS7(AES_BLOCK_SIZE * 8).unpadder()
        try:
            return unpadder.update(data) + unpadder.finalize()
        except ValueError as e:
            raise CryptoError(
                "Invalid padding in decrypted data", cipher_type=str(self.spec)
            ) from e


def decode_iv(value: str) -> bytes:
    """Decode a Base64 IV parameter, raising CryptoError when it is invalid."""
    try:
        return b64decode_strict(value)
    except (binascii.Error, ValueError) as e:
        raise CryptoError(f"IV parameter is not valid Base64: {e}") from e
