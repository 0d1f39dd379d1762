"""Delegation to the Cloud DLP de-identification service."""

import logging
import re
import threading
from collections.abc import Sequence
from typing import Any, Callable, Optional, Protocol, runtime_checkable

from google.api_core import exceptions as gcp_exceptions
from google.auth import exceptions as auth_exceptions
from google.cloud import dlp_v2

from ..core.exceptions import DelegatedServiceError

logger = logging.getLogger(__name__)

# Column name of the single-column table sent to DLP
VALUE_COLUMN = "bqfnvalue"

_TEMPLATE_PATTERN = re.compile(
    r"^(?P<parent>(?:projects|organizations)/[^/]+(?:/locations/[^/]+)?)"
    r"/(?:deidentifyTemplates|reidentifyTemplates)/[^/]+$"
)


@runtime_checkable
class DeidentificationService(Protocol):
    """External capability that masks and unmasks values with a template."""

    def deidentify(self, values: Sequence[str], template: str) -> list[str]:
        ...

    def reidentify(self, values: Sequence[str], template: str) -> list[str]:
        ...


def template_parent(template: str) -> str:
    """
    Derive the request parent from a template resource name.

    ``projects/p/locations/l/deidentifyTemplates/t`` -> ``projects/p/locations/l``

    Raises:
        DelegatedServiceError: If the template name is malformed
    """
    match = _TEMPLATE_PATTERN.match(template.strip())
    if not match:
        raise DelegatedServiceError(
            f"Malformed DLP template name '{template}'", template=template
        )
    return match.group("parent")


def _make_table_item(values: Sequence[str]) -> dict[str, Any]:
    return {
        "table": {
            "headers": [{"name": VALUE_COLUMN}],
            "rows": [{"values": [{"string_value": value}]} for value in values],
        }
    }


def _read_table_values(response: Any) -> list[str]:
    return [row.values[0].string_value for row in response.item.table.rows]


class DlpDeidentificationService:
    """DeidentificationService backed by ``dlp_v2.DlpServiceClient``.

    The client is created on first use and shared afterwards.
    """

    def __init__(self, client_factory: Optional[Callable[[], Any]] = None):
        self._client_factory = client_factory or dlp_v2.DlpServiceClient
        self._client: Optional[Any] = None
        self._lock = threading.Lock()

    @property
    def client(self) -> Any:
        if self._client is None:
            with self._lock:
                if self._client is None:
                    try:
                        self._client = self._client_factory()
                    except (
                        gcp_exceptions.GoogleAPIError,
                        auth_exceptions.GoogleAuthError,
                        OSError,
                    ) as e:
                        raise DelegatedServiceError(
                            f"Failed to create DLP client: {e}", original_error=e
                        ) from e
                    logger.info("DLP client initialized")
        return self._client

    def deidentify(self, values: Sequence[str], template: str) -> list[str]:
        request = {
            "parent": template_parent(template),
            "deidentify_template_name": template,
            "item": _make_table_item(values),
        }
        return self._call("deidentify_content", request, template)

    def reidentify(self, values: Sequence[str], template: str) -> list[str]:
        request = {
            "parent": template_parent(template),
            "reidentify_template_name": template,
            "item": _make_table_item(values),
        }
        return self._call("reidentify_content", request, template)

    def _call(self, method: str, request: dict[str, Any], template: str) -> list[str]:
        logger.debug(f"Calling DLP {method} for {len(request['item']['table']['rows'])} rows")
        try:
            response = getattr(self.client, method)(request=request)
        except gcp_exceptions.GoogleAPIError as e:
            raise DelegatedServiceError(
                f"DLP {method} failed: {e}", template=template, original_error=e
            ) from e
        return _read_table_values(response)


class DlpFn:
    """Forwards values to a DeidentificationService with a fixed template."""

    def __init__(self, service: DeidentificationService, template: Optional[str]):
        if not template:
            raise DelegatedServiceError("No DLP de-identification template specified")
        self.service = service
        self.template = template

    def tokenize(self, values: Sequence[str]) -> list[str]:
        return self._forward(self.service.deidentify, values)

    def reidentify(self, values: Sequence[str]) -> list[str]:
        return self._forward(self.service.reidentify, values)

    def _forward(
        self, operation: Callable[[Sequence[str], str], Sequence[str]], values: Sequence[str]
    ) -> list[str]:
        try:
            results = operation(values, self.template)
        except DelegatedServiceError:
            raise
        except Exception as e:
            # Any failure of the external capability fails the batch
            raise DelegatedServiceError(
                f"De-identification service failed: {e}",
                template=self.template,
                original_error=e,
            ) from e

        if len(results) != len(values):
            raise DelegatedServiceError(
                f"DLP returned {len(results)} values for {len(values)} rows",
                template=self.template,
            )
        return list(results)

    def __repr__(self) -> str:
        return f"DlpFn(template={self.template!r})"
