"""Response schema for academic-record extraction."""

from __future__ import annotations

from typing import Any, Dict

from pydantic import BaseModel, Field

from ..intake.schemas import ManualAcademicRecord


class ExtractedRecord(BaseModel):
    student_name: str = Field("", description="학생 성명")
    awards: str = Field("", description="수상경력")
    creative_activities: str = Field("", description="창의적 체험활동상황")
    detailed_abilities: str = Field("", description="세부능력 및 특기사항")
    reading_activities: str = Field("", description="독서활동상황")
    behavioral_characteristics: str = Field("", description="행동특성 및 종합의견")

    def to_manual_record(self) -> ManualAcademicRecord:
        return ManualAcademicRecord(**self.model_dump(exclude={"student_name"}))


EXTRACTION_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "student_name": {"type": "string", "description": "학생 성명"},
        "awards": {"type": "string", "description": "수상경력"},
        "creative_activities": {"type": "string", "description": "창의적 체험활동상황"},
        "detailed_abilities": {"type": "string", "description": "세부능력 및 특기사항"},
        "reading_activities": {"type": "string", "description": "독서활동상황"},
        "behavioral_characteristics": {"type": "string", "description": "행동특성 및 종합의견"},
    },
    "required": [
        "student_name",
        "awards",
        "creative_activities",
        "detailed_abilities",
        "reading_activities",
        "behavioral_characteristics",
    ],
}
