"""Data model for the onboarding questionnaire.

Everything here is a pure data-transfer shape: what the questionnaire
collects and what gets forwarded to the analysis prompt.
"""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field


Grade = Literal["", "1", "2", "3"]

SUPPORTED_IMAGE_TYPES: tuple[str, ...] = ("image/png", "image/jpeg", "image/webp")


def _filled(value: Optional[str]) -> bool:
    return isinstance(value, str) and bool(value.strip())


class ImagePayload(BaseModel):
    """An inline image: mime type plus base64 body (no data: prefix)."""

    mime_type: Literal["image/png", "image/jpeg", "image/webp"]
    data: str = Field(..., min_length=1, description="Base64-encoded file contents")

    def data_url(self) -> str:
        return f"data:{self.mime_type};base64,{self.data}"


class ManualAcademicRecord(BaseModel):
    """The five sections of the academic record (학생생활기록부)."""

    awards: str = ""  # 수상경력
    creative_activities: str = ""  # 창의적 체험활동상황
    detailed_abilities: str = ""  # 세부능력 및 특기사항
    reading_activities: str = ""  # 독서활동상황
    behavioral_characteristics: str = ""  # 행동특성 및 종합의견

    def has_content(self) -> bool:
        return any(_filled(v) for v in self.model_dump().values())


class MockExamScores(BaseModel):
    """Latest mock exam results as typed by the user (percentile or grade)."""

    korean: str = ""
    math: str = ""
    english: str = ""
    inquiry1: str = ""
    inquiry2: str = ""

    def any_filled(self) -> bool:
        return any(_filled(v) for v in self.model_dump().values())

    def all_filled(self) -> bool:
        return all(_filled(v) for v in self.model_dump().values())


class StudentInfo(BaseModel):
    grade: Grade = ""
    desired_field: str = ""
    student_name: Optional[str] = None
    academic_record: Optional[str] = None  # pasted free text
    academic_record_image: Optional[ImagePayload] = None
    manual_academic_record: Optional[ManualAcademicRecord] = None
    mock_exam: MockExamScores = Field(default_factory=MockExamScores)


class Location(BaseModel):
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
