"""Tests for algorithm selection."""

import pytest

from bqtokenize.core.exceptions import UnknownAlgorithmError, UnknownOperationModeError
from bqtokenize.core.strategies import (
    AES_ECB,
    AlgorithmKind,
    AlgorithmSelector,
    OperationMode,
)


class TestAlgorithmKind:
    """Test the AlgorithmKind enum."""

    def test_enum_values(self) -> None:
        assert AlgorithmKind.IDENTITY.value == "identity"
        assert AlgorithmKind.BASE64.value == "base64"
        assert AlgorithmKind.AES.value == "aes"
        assert AlgorithmKind.DLP.value == "dlp"

    @pytest.mark.parametrize(
        "tag,expected",
        [
            ("identity", AlgorithmKind.IDENTITY),
            ("BASE64", AlgorithmKind.BASE64),
            (" aes ", AlgorithmKind.AES),
            ("dlp", AlgorithmKind.DLP),
            ("delegated-service", AlgorithmKind.DLP),
        ],
    )
    def test_parse(self, tag: str, expected: AlgorithmKind) -> None:
        assert AlgorithmKind.parse(tag) is expected

    def test_parse_unknown(self) -> None:
        with pytest.raises(UnknownAlgorithmError, match="Unknown algorithm 'rot13'") as exc_info:
            AlgorithmKind.parse("rot13")
        assert exc_info.value.context["algorithm"] == "rot13"

    def test_parse_missing(self) -> None:
        with pytest.raises(UnknownAlgorithmError, match="No algorithm specified"):
            AlgorithmKind.parse(None)


class TestOperationMode:
    """Test the OperationMode enum."""

    def test_parse(self) -> None:
        assert OperationMode.parse("tokenize") is OperationMode.TOKENIZE
        assert OperationMode.parse("ReIdentify") is OperationMode.REIDENTIFY

    def test_parse_unknown(self) -> None:
        with pytest.raises(UnknownOperationModeError, match="Unknown operation mode 'encrypt'"):
            OperationMode.parse("encrypt")

    def test_parse_missing(self) -> None:
        with pytest.raises(UnknownOperationModeError):
            OperationMode.parse(None)


class TestAlgorithmSelector:
    """Test the AlgorithmSelector dataclass."""

    def test_basic_creation(self) -> None:
        selector = AlgorithmSelector(AlgorithmKind.BASE64)
        assert selector.algorithm is AlgorithmKind.BASE64
        assert selector.aes_cipher_type is None
        assert selector.aes_iv_parameter_base64 is None
        assert selector.dlp_template is None

    def test_frozen_immutability(self) -> None:
        selector = AlgorithmSelector(AlgorithmKind.AES)
        with pytest.raises(Exception):  # FrozenInstanceError
            selector.algorithm = AlgorithmKind.BASE64  # type: ignore

    def test_from_context(self) -> None:
        selector = AlgorithmSelector.from_context(
            {
                "mode": "tokenize",
                "algo": "aes",
                "aes-cipher-type": "AES/ECB/PKCS5PADDING",
                "aes-iv-parameter-base64": "VGhpc0lzVGVzdFZlY3Rvcg==",
            }
        )
        assert selector.algorithm is AlgorithmKind.AES
        assert selector.aes_cipher_type == "AES/ECB/PKCS5PADDING"
        assert selector.aes_iv_parameter_base64 == "VGhpc0lzVGVzdFZlY3Rvcg=="
        assert selector.dlp_template is None

    def test_from_context_dlp(self) -> None:
        selector = AlgorithmSelector.from_context(
            {"algo": "dlp", "dlp-deid-template": "projects/p/deidentifyTemplates/t"}
        )
        assert selector.algorithm is AlgorithmKind.DLP
        assert selector.dlp_template == "projects/p/deidentifyTemplates/t"

    def test_from_context_without_algorithm(self) -> None:
        with pytest.raises(UnknownAlgorithmError):
            AlgorithmSelector.from_context({"mode": "tokenize"})

    def test_blank_options_are_unset(self) -> None:
        selector = AlgorithmSelector(AlgorithmKind.AES, aes_cipher_type="  ", dlp_template="")
        assert selector.aes_cipher_type is None
        assert selector.dlp_template is None

    def test_with_options(self) -> None:
        updated = AES_ECB.with_options(aes_iv_parameter_base64="AAAA")
        assert updated.aes_cipher_type == "AES/ECB/PKCS5PADDING"
        assert updated.aes_iv_parameter_base64 == "AAAA"
        assert AES_ECB.aes_iv_parameter_base64 is None
