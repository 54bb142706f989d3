"""Tests for the analysis prompt builder."""

from admissions_navigator.analysis.prompts import (
    GENERAL_SUPPORT,
    GEOLOCATED_SUPPORT,
    IMAGE_ACADEMIC_RECORD,
    NO_ACADEMIC_RECORD,
    NO_LOCATION_INFO,
    SKIPPED_MOCK_EXAM,
    build_analysis_prompt,
    build_analysis_text,
)
from admissions_navigator.intake.schemas import (
    ImagePayload,
    Location,
    ManualAcademicRecord,
    MockExamScores,
    StudentInfo,
)


IMAGE = ImagePayload(mime_type="image/jpeg", data="/9j/4AAQ")


def _info(**overrides):
    data = {
        "grade": "2",
        "desired_field": "컴퓨터공학",
        "manual_academic_record": ManualAcademicRecord(detailed_abilities="정보 과목에서 정렬 알고리즘 탐구"),
    }
    data.update(overrides)
    return StudentInfo(**data)


def test_empty_mock_exam_asks_for_estimate():
    """With no scores at all the model is told to estimate from the record."""
    text = build_analysis_text(_info(), None)
    assert SKIPPED_MOCK_EXAM in text
    assert "estimate the student's academic performance" in text


def test_single_mock_score_is_forwarded():
    """One filled score is enough to send scores instead of the estimate request."""
    text = build_analysis_text(_info(mock_exam=MockExamScores(math="97")), None)
    assert SKIPPED_MOCK_EXAM not in text
    assert "- Mock Exam Scores (percentile): Korean , Math 97" in text


def test_full_mock_scores():
    scores = MockExamScores(korean="95", math="97", english="1", inquiry1="90", inquiry2="88")
    text = build_analysis_text(_info(mock_exam=scores), None)
    assert "Korean 95, Math 97, English 1, Inquiry1 90, Inquiry2 88" in text


def test_no_location_requests_general_advice():
    text = build_analysis_text(_info(), None)
    assert NO_LOCATION_INFO in text
    assert GENERAL_SUPPORT in text
    assert GEOLOCATED_SUPPORT not in text


def test_location_is_included():
    text = build_analysis_text(_info(), Location(latitude=37.5665, longitude=126.978))
    assert "latitude 37.5665 and longitude 126.978" in text
    assert GEOLOCATED_SUPPORT in text
    assert GENERAL_SUPPORT not in text


def test_manual_record_wins_over_image():
    """Verified manual text is the record source even if an image was uploaded."""
    info = _info(academic_record_image=IMAGE, academic_record="pasted")
    text = build_analysis_text(info, None)
    assert "User-Verified Text" in text
    assert "정보 과목에서 정렬 알고리즘 탐구" in text
    assert "**Awards**: N/A" in text
    assert IMAGE_ACADEMIC_RECORD not in text

    parts = build_analysis_prompt(info, None)
    assert [p["type"] for p in parts] == ["input_text"]


def test_image_record_attaches_image():
    info = _info(manual_academic_record=ManualAcademicRecord(), academic_record_image=IMAGE)
    parts = build_analysis_prompt(info, None)
    assert [p["type"] for p in parts] == ["input_text", "input_image"]
    assert parts[1]["image_url"] == "data:image/jpeg;base64,/9j/4AAQ"
    assert IMAGE_ACADEMIC_RECORD in parts[0]["text"]


def test_pasted_text_then_nothing():
    text = build_analysis_text(_info(manual_academic_record=None, academic_record="동아리 부장"), None)
    assert "Pasted Text" in text
    assert "동아리 부장" in text

    text = build_analysis_text(_info(manual_academic_record=None), None)
    assert NO_ACADEMIC_RECORD in text


def test_student_name_handling():
    assert "The student's name is 김민준. Use this exact name" in build_analysis_text(
        _info(student_name=" 김민준 "), None
    )
    assert '"OOO 학생"' in build_analysis_text(_info(), None)


def test_grade_and_field_are_in_prompt():
    text = build_analysis_text(_info(grade="3", desired_field="의예과"), None)
    assert "- Grade: 3학년" in text
    assert "- Desired Field of Study: 의예과" in text
