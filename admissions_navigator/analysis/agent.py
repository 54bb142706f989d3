from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

from pydantic import ValidationError

from ..gateway import DEFAULT_MODEL, ModelCallError, generate_json, get_openai_client
from ..intake.schemas import Location, StudentInfo
from .prompts import build_analysis_prompt
from .schemas import ANALYSIS_REPORT_SCHEMA, AnalysisReport


logger = logging.getLogger(__name__)

ANALYSIS_FAILURE_MESSAGE = "Failed to get analysis from AI. Please try again later."


class AnalysisError(RuntimeError):
    """The model call failed or its output did not match the report schema."""


@dataclass(frozen=True)
class AnalysisConfig:
    max_output_tokens: int = 8000


class AnalysisAgent:
    """Sends the student's profile to the model and returns a typed report."""

    def __init__(
        self,
        model: Optional[str] = None,
        client: Any = None,
        config: Optional[AnalysisConfig] = None,
    ) -> None:
        self.model = model or DEFAULT_MODEL
        self._client = client
        self.config = config or AnalysisConfig()

    @property
    def client(self) -> Any:
        # Created on first use, inside the call that maps model failures.
        if self._client is None:
            self._client = get_openai_client()
        return self._client

    def analyze(self, info: StudentInfo, location: Optional[Location] = None) -> AnalysisReport:
        parts = build_analysis_prompt(info, location)
        logger.info(
            "Requesting analysis (grade=%s, image=%s, location=%s)",
            info.grade,
            any(p.get("type") == "input_image" for p in parts),
            location is not None,
        )

        try:
            data = generate_json(
                self.client,
                self.model,
                parts,
                schema_name="admissions_analysis_report",
                schema=ANALYSIS_REPORT_SCHEMA,
                max_output_tokens=self.config.max_output_tokens,
            )
            return AnalysisReport.model_validate(data)
        except ModelCallError as e:
            raise AnalysisError(ANALYSIS_FAILURE_MESSAGE) from e
        except ValidationError as e:
            logger.warning("Analysis output did not match the report schema: %s", e)
            raise AnalysisError(ANALYSIS_FAILURE_MESSAGE) from e
