from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional, Tuple

from pydantic import ValidationError

from ..gateway import DEFAULT_MODEL, ModelCallError, build_input, generate_json, get_openai_client
from ..intake.schemas import ImagePayload, ManualAcademicRecord
from .prompts import EXTRACTION_INSTRUCTIONS
from .schemas import EXTRACTION_SCHEMA, ExtractedRecord


logger = logging.getLogger(__name__)

EXTRACTION_FAILURE_MESSAGE = "Failed to extract data from the image. Please try again or enter the data manually."

UNKNOWN_NAME = "OOO"


class ExtractionError(RuntimeError):
    """The record image could not be read; the user can retry or type it in."""


@dataclass(frozen=True)
class ExtractionConfig:
    max_output_tokens: int = 4000


class RecordExtractionAgent:
    """Reads an academic-record image into structured fields."""

    def __init__(
        self,
        model: Optional[str] = None,
        client: Any = None,
        config: Optional[ExtractionConfig] = None,
    ) -> None:
        self.model = model or DEFAULT_MODEL
        self._client = client
        self.config = config or ExtractionConfig()

    @property
    def client(self) -> Any:
        # Created on first use, inside the call that maps model failures.
        if self._client is None:
            self._client = get_openai_client()
        return self._client

    def extract(self, image: ImagePayload) -> Tuple[str, ManualAcademicRecord]:
        parts = build_input(EXTRACTION_INSTRUCTIONS, image=image, image_first=True)

        try:
            data = generate_json(
                self.client,
                self.model,
                parts,
                schema_name="academic_record_extraction",
                schema=EXTRACTION_SCHEMA,
                max_output_tokens=self.config.max_output_tokens,
            )
            extracted = ExtractedRecord.model_validate(data)
        except (ModelCallError, ValidationError) as e:
            logger.warning("Academic record extraction failed: %s", e)
            raise ExtractionError(EXTRACTION_FAILURE_MESSAGE) from e

        student_name = extracted.student_name.strip() or UNKNOWN_NAME
        return student_name, extracted.to_manual_record()
