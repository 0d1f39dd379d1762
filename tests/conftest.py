"""Shared fixtures for bqtokenize tests."""

import base64
import logging
from collections.abc import Generator, Sequence

import pytest

from bqtokenize.core.config import TokenizeConfig, reset_config
from bqtokenize.dispatcher import Dispatcher

# Key material used by the known-vector tests
TEST_AES_KEY = "2lDNBd0hHgCZ+1/P+fWO+g=="
TEST_AES_IV = "/t2/6YFewDgoHeQM1QBZdw=="
TEST_DLP_TEMPLATE = "projects/test-project-id/locations/test-region1/deidentifyTemplates/template1"


class Base64DeidService:
    """De-identification service double that Base64 encodes values."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, list[str], str]] = []

    def deidentify(self, values: Sequence[str], template: str) -> list[str]:
        self.calls.append(("deidentify", list(values), template))
        return [base64.b64encode(v.encode("utf-8")).decode("ascii") for v in values]

    def reidentify(self, values: Sequence[str], template: str) -> list[str]:
        self.calls.append(("reidentify", list(values), template))
        return [base64.b64decode(v).decode("utf-8") for v in values]


class FailingDeidService:
    """De-identification service double that always fails."""

    def __init__(self, error: Exception) -> None:
        self.error = error

    def deidentify(self, values: Sequence[str], template: str) -> list[str]:
        raise self.error

    def reidentify(self, values: Sequence[str], template: str) -> list[str]:
        raise self.error


@pytest.fixture
def aes_config() -> TokenizeConfig:
    """Configuration with every algorithm enabled and the test key material."""
    return TokenizeConfig(
        aes_key=base64.b64decode(TEST_AES_KEY),
        aes_iv=base64.b64decode(TEST_AES_IV),
    )


@pytest.fixture
def deid_service() -> Base64DeidService:
    return Base64DeidService()


@pytest.fixture
def dispatcher(aes_config: TokenizeConfig, deid_service: Base64DeidService) -> Dispatcher:
    return Dispatcher(aes_config, lambda: deid_service)


@pytest.fixture
def names() -> list[list[str]]:
    """Two unary rows."""
    return [["Anant"], ["Damle"]]


@pytest.fixture(autouse=True)
def isolate_global_config() -> Generator[None, None, None]:
    """Reset the lazily loaded global configuration between tests."""
    reset_config()
    yield
    reset_config()


@pytest.fixture(autouse=True)
def isolate_root_logger() -> Generator[None, None, None]:
    """Undo configure_logging() calls made by a test."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
