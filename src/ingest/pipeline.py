"""Record orchestration for text manipulation pipelines.

This module drives every input record through its configured text groups:
it seeds the output record, resolves each data source, folds the group's
operations over the value and commits the result, strictly in input order.
"""

from __future__ import annotations

import copy
from typing import Iterable, Sequence

from core.constants import DEFAULT_MIME_TYPE
from core.errors import RecordProcessingError, TextsmithError
from core.logging_config import get_logger
from core.types import (
    DataSource,
    InputRecord,
    OutputRecord,
    PipelineOptions,
    RecordResult,
    TextGroup,
    TextGroupProvider,
)
from ingest.source_resolver import resolve_source
from store.destination import commit_text
from transforms.operation_engine import apply_operations

_LOGGER = get_logger(__name__)


class TextPipelineRunner:
    """Runner applying configured text groups to input records."""

    def __init__(
        self,
        text_groups: TextGroupProvider,
        options: PipelineOptions | None = None,
        default_mime_type: str = DEFAULT_MIME_TYPE,
    ) -> None:
        self._text_groups = text_groups
        self._options = options or PipelineOptions()
        self._default_mime_type = default_mime_type

    def process_record(self, record: InputRecord, record_index: int) -> OutputRecord:
        """Process one input record into an output record.

        Args:
            record: Raw input record.
            record_index: Zero-based input position.

        Returns:
            Output record built from every group and source.

        Raises:
            RecordProcessingError: If any source fails to resolve, transform or commit.
        """
        output = _seed_output(record, self._options.keep_only_set)
        try:
            for group in self._text_groups(record_index):
                for source in group.sources:
                    self._process_source(record, record_index, group, source, output)
        except TextsmithError as error:
            raise RecordProcessingError(record_index, error) from error
        return output

    def process_records(self, records: Iterable[InputRecord]) -> list[RecordResult]:
        """Process records in input order.

        Args:
            records: Input records.

        Returns:
            One result per processed record, in input order.

        Raises:
            RecordProcessingError: On the first failure unless continue-on-fail is set.
        """
        results: list[RecordResult] = []
        for record_index, record in enumerate(records):
            try:
                output = self.process_record(record, record_index)
            except RecordProcessingError as error:
                _LOGGER.warning(
                    "record_failed",
                    record_index=record_index,
                    error=str(error.cause),
                    error_type=type(error.cause).__name__,
                )
                if not self._options.continue_on_fail:
                    raise
                results.append(RecordResult(record_index=record_index, error=error))
                continue
            _LOGGER.debug("record_processed", record_index=record_index)
            results.append(RecordResult(record_index=record_index, output=output))
        _log_pipeline_completion(results)
        return results

    def _process_source(
        self,
        record: InputRecord,
        record_index: int,
        group: TextGroup,
        source: DataSource,
        output: OutputRecord,
    ) -> None:
        text = resolve_source(source, record, output)
        if text is None:
            _LOGGER.debug(
                "source_skipped",
                record_index=record_index,
                read_type=type(source.read).__name__,
            )
            return
        text = apply_operations(text, group.operations)
        commit_text(text, source.write, output, self._default_mime_type)


def static_text_groups(groups: Sequence[TextGroup]) -> TextGroupProvider:
    """Build a provider returning the same groups for every record."""
    frozen_groups = tuple(groups)
    return lambda record_index: frozen_groups


def process_record(
    record: InputRecord,
    record_index: int,
    text_groups: TextGroupProvider,
    options: PipelineOptions | None = None,
) -> OutputRecord:
    """Process one input record with a text group provider.

    Args:
        record: Raw input record.
        record_index: Zero-based input position.
        text_groups: Provider returning the groups for a record index.
        options: Record-level processing options.

    Returns:
        Output record.

    Raises:
        RecordProcessingError: If the record fails.
    """
    return TextPipelineRunner(text_groups, options).process_record(record, record_index)


def process_records(
    records: Iterable[InputRecord],
    text_groups: TextGroupProvider,
    options: PipelineOptions | None = None,
    default_mime_type: str = DEFAULT_MIME_TYPE,
) -> list[RecordResult]:
    """Process records in input order with a text group provider.

    Args:
        records: Input records.
        text_groups: Provider returning the groups for a record index.
        options: Record-level processing options.
        default_mime_type: MIME type for file destinations that set none.

    Returns:
        Per-record results in input order.

    Raises:
        RecordProcessingError: On the first failure unless continue-on-fail is set.
    """
    runner = TextPipelineRunner(text_groups, options, default_mime_type)
    return runner.process_records(records)


def _seed_output(record: InputRecord, keep_only_set: bool) -> OutputRecord:
    if keep_only_set:
        return OutputRecord()
    return OutputRecord(json=copy.deepcopy(dict(record.json)), binary=dict(record.binary))


def _log_pipeline_completion(results: list[RecordResult]) -> None:
    failed_count = sum(1 for result in results if not result.succeeded)
    _LOGGER.info(
        "pipeline_completed",
        record_count=len(results),
        succeeded_count=len(results) - failed_count,
        failed_count=failed_count,
    )
