"""Prompt construction for the admissions analysis.

Kept in a separate module so the wording can be checked in tests without
calling the model.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from ..gateway import build_input
from ..intake.schemas import Location, ManualAcademicRecord, StudentInfo


ANALYSIS_TEMPLATE = """
You are an expert South Korean college admissions consultant AI named '입시 네비게이터'. Your role is to provide a detailed, data-driven analysis for a parent about their high school student's university admission prospects.

**Student Data:**
- Grade: {grade}학년
- Desired Field of Study: {desired_field}
{mock_exam_info}
{academic_record_info}

**User Location:**
{location_info}

**Your Task:**
Analyze all the provided information and generate a comprehensive report. The report must be in Korean.

1. **Student Identification**: {student_name_info}
2. **Quantitative Analysis**:
    - Create grade trend chart data for 4 semesters. Estimate GPA based on the text.
    - Analyze mock exam scores, highlighting strengths and weaknesses. If scores are not provided, estimate performance based on the academic record.
    - Generate Z-scores for 5 key subjects based on the academic record.
3. **Qualitative Analysis**:
    - Extract at least 10-15 relevant keywords from the academic record for a keyword cloud, weighted by importance for the desired field.
    - Create radar chart data for the 4 key competencies (학업역량, 전공적합성, 인성, 발전가능성) on a scale of 5.
4. **Application Strategy**:
    - Calculate the probability of success for Early Decision (수시) vs. Regular Decision (정시).
    - Recommend the most advantageous application type.
5. **University Recommendations**:
    - Recommend 6 Early Decision (수시) options categorized as '상향', '적정', '안정'.
    - Recommend 3 Regular Decision (정시) options categorized similarly.
    - For each recommendation, provide the university, major, admission type, chance of acceptance (%), and a brief rationale.
6. **Local Support (LBS)**:
    - Identify the student's weakest subject.
    - {local_support_instruction}

**CRITICAL**: Return a single JSON object matching the provided schema. No markdown, no text outside the JSON.
""".strip()


NO_LOCATION_INFO = "The user has not provided their location."

GEOLOCATED_SUPPORT = (
    "Based on the user's location, recommend 3 nearby specialized academies and 2 study spaces "
    "(libraries or study cafes). Include realistic names, distances, ratings, and review counts."
)

GENERAL_SUPPORT = (
    "Location is not available, so provide general advice instead: recommend 3 types of specialized "
    "academies and 2 kinds of study spaces (libraries or study cafes) the student could look for, "
    "with distance set to '위치 정보 없음'. Include realistic ratings and review counts."
)

SKIPPED_MOCK_EXAM = (
    "- Mock Exam Scores: The user skipped this step. Please estimate the student's academic performance "
    "for the regular decision (정시) analysis based on the provided academic record (학생 생활기록부) content."
)

NO_ACADEMIC_RECORD = (
    "No academic record was provided. Please make a general analysis based on the mock exam scores "
    "and desired field."
)

IMAGE_ACADEMIC_RECORD = (
    "The academic record (생기부) is provided as an attached image. Please perform OCR and analyze its content."
)


def format_manual_record(record: ManualAcademicRecord) -> str:
    return "\n".join(
        [
            "- **Academic Record (User-Verified Text)**: This is the primary source for qualitative analysis.",
            f"  - **Awards**: {record.awards or 'N/A'}",
            f"  - **Creative Experiential Activities**: {record.creative_activities or 'N/A'}",
            f"  - **Detailed Abilities & Special Notes by Subject**: {record.detailed_abilities or 'N/A'}",
            f"  - **Reading Activities**: {record.reading_activities or 'N/A'}",
            f"  - **Behavioral Characteristics & Comprehensive Opinion**: {record.behavioral_characteristics or 'N/A'}",
        ]
    )


def format_mock_exam(info: StudentInfo) -> str:
    if not info.mock_exam.any_filled():
        return SKIPPED_MOCK_EXAM
    m = info.mock_exam
    return (
        f"- Mock Exam Scores (percentile): Korean {m.korean}, Math {m.math}, English {m.english}, "
        f"Inquiry1 {m.inquiry1}, Inquiry2 {m.inquiry2}"
    )


def format_location(location: Optional[Location]) -> str:
    if location is None:
        return NO_LOCATION_INFO
    return f"The user is located at latitude {location.latitude} and longitude {location.longitude}."


def _uses_image(info: StudentInfo) -> bool:
    has_manual = info.manual_academic_record is not None and info.manual_academic_record.has_content()
    return not has_manual and info.academic_record_image is not None


def format_academic_record(info: StudentInfo) -> str:
    """Pick the record source: verified manual text, then image, then pasted text."""
    record = info.manual_academic_record
    if record is not None and record.has_content():
        return format_manual_record(record)
    if info.academic_record_image is not None:
        return IMAGE_ACADEMIC_RECORD
    if info.academic_record and info.academic_record.strip():
        return f"- **Academic Record (Pasted Text)**:\n---\n{info.academic_record}\n---"
    return NO_ACADEMIC_RECORD


def build_analysis_text(info: StudentInfo, location: Optional[Location]) -> str:
    if info.student_name and info.student_name.strip():
        student_name_info = f"The student's name is {info.student_name.strip()}. Use this exact name in the report."
    else:
        student_name_info = 'Anonymize the student\'s name to "OOO 학생".'

    return ANALYSIS_TEMPLATE.format(
        grade=info.grade,
        desired_field=info.desired_field,
        mock_exam_info=format_mock_exam(info),
        academic_record_info=format_academic_record(info),
        location_info=format_location(location),
        student_name_info=student_name_info,
        local_support_instruction=GEOLOCATED_SUPPORT if location is not None else GENERAL_SUPPORT,
    )


def build_analysis_prompt(info: StudentInfo, location: Optional[Location]) -> List[Dict[str, Any]]:
    """Instruction text first, then the record image only when it is the record source."""
    image = info.academic_record_image if _uses_image(info) else None
    return build_input(build_analysis_text(info, location), image=image)
