"""Python SDK for text pipeline runs.

This module exposes high-level APIs for loading pipeline specs, reading
input records, and processing them with the configured text groups.
"""

from __future__ import annotations

from typing import Iterable

from core.config import TextsmithConfig
from core.pipeline_spec import PipelineSpec, load_pipeline_spec
from core.types import InputRecord, RecordResult
from ingest.input_reader import read_input_records
from ingest.pipeline import TextPipelineRunner, static_text_groups


class TextsmithClient:
    """Primary SDK entry point for text pipeline workflows."""

    def __init__(self, config: TextsmithConfig | None = None) -> None:
        """Create SDK client.

        Args:
            config: Optional runtime configuration.
        """
        self._config = config or TextsmithConfig.from_env()

    @property
    def config(self) -> TextsmithConfig:
        """Return the runtime configuration."""
        return self._config

    def load_spec(self, spec_path: str) -> PipelineSpec:
        """Load a YAML pipeline spec.

        Raises:
            PipelineSpecError: If the spec is invalid.
        """
        return load_pipeline_spec(spec_path)

    def read_records(self, input_uri: str) -> list[InputRecord]:
        """Read JSONL input records from a local path or S3 prefix.

        Raises:
            RecordReadError: If the input cannot be read.
        """
        return read_input_records(input_uri, self._config)

    def process(self, spec: PipelineSpec, records: Iterable[InputRecord]) -> list[RecordResult]:
        """Process records with a pipeline spec.

        Args:
            spec: Validated pipeline spec.
            records: Input records in order.

        Returns:
            Per-record results in input order.

        Raises:
            RecordProcessingError: On the first failure unless continue-on-fail is set.
        """
        runner = TextPipelineRunner(
            static_text_groups(spec.text_groups),
            spec.options(continue_on_fail=self._config.continue_on_fail),
            self._config.default_mime_type,
        )
        return runner.process_records(records)

    def run(self, spec_path: str, input_uri: str) -> list[RecordResult]:
        """Load a spec, read the input and process every record.

        Args:
            spec_path: YAML pipeline spec path.
            input_uri: Local JSONL file, directory, or ``s3://`` URI.

        Returns:
            Per-record results in input order.
        """
        spec = self.load_spec(spec_path)
        return self.process(spec, self.read_records(input_uri))
