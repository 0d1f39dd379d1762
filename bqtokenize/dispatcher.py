"""Runs a batch of rows through the selected masking function.

The dispatcher is the only place where failures are turned into response
envelopes; nothing raised while handling a batch escapes ``handle``.
"""

import logging
from collections.abc import Mapping, Sequence
from typing import Optional, Union

from .core.config import TokenizeConfig
from .core.exceptions import BqTokenizeError
from .core.results import ResponseEnvelope
from .core.strategies import MODE_KEY, AlgorithmSelector, OperationMode
from .fns.base import Row, UnaryStringArgFn
from .fns.factory import DeidServiceFactory, TokenizeFnFactory

logger = logging.getLogger(__name__)


def format_error(error: Exception) -> str:
    """Envelope error message naming the failure kind."""
    if isinstance(error, BqTokenizeError):
        message = f"{error.kind}: {error.message}"
        row_index = error.context.get("row_index")
        if row_index is not None and not error.message.startswith("Row "):
            message += f" (row {row_index})"
        return message
    return f"InternalError: {type(error).__name__}: {error}"


class Dispatcher:
    """Applies tokenize or reidentify to a full batch, all or nothing."""

    def __init__(
        self,
        config: TokenizeConfig,
        deid_service_factory: Optional[DeidServiceFactory] = None,
    ):
        self.config = config
        self.factory = TokenizeFnFactory(config, deid_service_factory)

    def handle(
        self,
        rows: Sequence[Row],
        mode: Union[OperationMode, str],
        selector: AlgorithmSelector,
    ) -> ResponseEnvelope:
        """
        Process one batch.

        Args:
            rows: Rows of call arguments, in order
            mode: Tokenize or reidentify
            selector: Algorithm and its per-call options

        Returns:
            The values of every row in row order, or an error
        """
        try:
            values = self._run(rows, mode, selector)
        except BqTokenizeError as e:
            logger.warning(f"Batch of {len(rows)} rows failed: {e.to_dict()}")
            return ResponseEnvelope.failure(format_error(e))
        except Exception as e:
            logger.exception(f"Unexpected failure processing batch of {len(rows)} rows")
            return ResponseEnvelope.failure(format_error(e))
        return ResponseEnvelope.success(values)

    def handle_context(
        self, rows: Sequence[Row], context: Mapping[str, str]
    ) -> ResponseEnvelope:
        """Process a batch whose mode and algorithm come from a userDefinedContext map."""
        try:
            mode = OperationMode.parse(context.get(MODE_KEY))
            selector = AlgorithmSelector.from_context(context)
        except BqTokenizeError as e:
            logger.warning(f"Rejected call context: {e.to_dict()}")
            return ResponseEnvelope.failure(format_error(e))
        return self.handle(rows, mode, selector)

    def _run(
        self,
        rows: Sequence[Row],
        mode: Union[OperationMode, str],
        selector: AlgorithmSelector,
    ) -> list[str]:
        if not isinstance(mode, OperationMode):
            mode = OperationMode.parse(mode)

        fn = UnaryStringArgFn(self.factory.create(selector))
        if mode is OperationMode.TOKENIZE:
            values = fn.tokenize(rows)
        else:
            values = fn.reidentify(rows)

        if len(values) != len(rows):
            raise BqTokenizeError(
                f"{fn!r} returned {len(values)} values for {len(rows)} rows"
            )

        logger.info(
            f"Processed {len(rows)} rows: mode={mode.value}, algorithm={selector.algorithm.value}"
        )
        return values
