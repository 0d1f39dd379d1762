"""Builds the function for an algorithm selector."""

from typing import Callable, Optional

from ..core.config import TokenizeConfig
from ..core.exceptions import UnknownAlgorithmError
from ..core.strategies import AlgorithmKind, AlgorithmSelector
from .aes import AesFn
from .base import TokenizeFn
from .base64_fn import Base64Fn
from .dlp import DeidentificationService, DlpDeidentificationService, DlpFn
from .identity import IdentityFn

DeidServiceFactory = Callable[[], DeidentificationService]


class TokenizeFnFactory:
    """
    Creates functions from selectors and the process configuration.

    Identity and Base64 have no options and are shared. AES and DLP are
    built per call because the call can override their options. The
    de-identification service is created on first DLP use and shared.
    """

    def __init__(
        self,
        config: TokenizeConfig,
        deid_service_factory: Optional[DeidServiceFactory] = None,
    ):
        self.config = config
        self._deid_service_factory = deid_service_factory or DlpDeidentificationService
        self._deid_service: Optional[DeidentificationService] = None
        self._identity = IdentityFn()
        self._base64 = Base64Fn()

    @property
    def deid_service(self) -> DeidentificationService:
        # DlpDeidentificationService is itself lazy, so constructing it twice
        # under a race is harmless.
        if self._deid_service is None:
            self._deid_service = self._deid_service_factory()
        return self._deid_service

    def create(self, selector: AlgorithmSelector) -> TokenizeFn:
        kind = selector.algorithm
        if not self.config.is_enabled(kind):
            raise UnknownAlgorithmError(
                f"Algorithm '{kind.value}' is not enabled, enabled: "
                f"{sorted(self.config.algorithm_names)}",
                algorithm=kind.value,
            )

        if kind is AlgorithmKind.IDENTITY:
            return self._identity
        if kind is AlgorithmKind.BASE64:
            return self._base64
        if kind is AlgorithmKind.AES:
            return AesFn.create(self.config, selector)
        if kind is AlgorithmKind.DLP:
            return DlpFn(self.deid_service, selector.dlp_template)

        raise UnknownAlgorithmError(f"Unknown algorithm '{kind}'", algorithm=str(kind))
