"""Scripted runs of the terminal front ends."""

from admissions_navigator.extraction.agent import ExtractionError
from admissions_navigator.intake.cli_demo import run_onboarding_cli
from admissions_navigator.intake.schemas import ManualAcademicRecord
from admissions_navigator.report.cli_demo import show_report


def _scripted(answers):
    it = iter(answers)
    return lambda prompt: next(it)


def test_onboarding_manual_path():
    answers = [
        "4", "2",            # invalid grade, then grade 2
        "",  "생명과학",      # blank field is asked again
        "2",                 # manual entry
        "효소 반응 속도 탐구", "", "", "", "",
        "2",                 # skip mock exam
        "2", "37.5665, 126.9780",
    ]
    info, location = run_onboarding_cli(input_fn=_scripted(answers))

    assert info.grade == "2"
    assert info.desired_field == "생명과학"
    assert info.manual_academic_record.detailed_abilities == "효소 반응 속도 탐구"
    assert not info.mock_exam.any_filled()
    assert location.latitude == 37.5665


def test_onboarding_image_path_falls_back_after_failure(tmp_path, capsys):
    image = tmp_path / "record.png"
    image.write_bytes(b"\x89PNG")

    class FlakyExtractor:
        def __init__(self):
            self.calls = 0

        def extract(self, payload):
            self.calls += 1
            if self.calls == 1:
                raise ExtractionError("Failed to extract data from the image.")
            return "최유나", ManualAcademicRecord(awards="과학 탐구 대회 금상")

    answers = [
        "3", "물리학",
        "1", str(image),     # first attempt fails
        str(image),          # retry succeeds and pre-fills the record
        "", "", "", "", "",  # keep extracted values
        "1", "90", "92", "2", "85", "80",
        "3",                 # decline location
    ]
    info, location = run_onboarding_cli(extractor=FlakyExtractor(), input_fn=_scripted(answers))

    assert info.student_name == "최유나"
    assert info.manual_academic_record.awards == "과학 탐구 대회 금상"
    assert info.academic_record_image is not None
    assert info.mock_exam.english == "2"
    assert location is None
    out = capsys.readouterr().out
    assert "❌ Failed to extract data from the image." in out
    assert "위치 정보를 가져오는데 실패했습니다." in out


def test_onboarding_exit():
    assert run_onboarding_cli(input_fn=_scripted(["1", "exit"])) is None


def test_show_report_switches_tabs(report, capsys):
    show_report(report, input_fn=_scripted(["2", "3", "q"]))
    out = capsys.readouterr().out
    assert "=== 핵심 진단 요약 ===" in out
    assert "=== 수시 6카드 추천 ===" in out
    assert "=== 지역 기반 학업 지원 솔루션 ===" in out


def test_onboarding_back_navigation():
    """'b' steps back; earlier answers are kept and Enter confirms them."""
    answers = [
        "1", "경영학",
        "b",                 # back from the record step
        "", "",              # keep grade and desired field
        "2",                 # manual entry
        "경제 동아리 부장", "", "", "", "",
        "b",                 # back from the mock exam step
        "", "", "", "", "",  # review the record, keep everything
        "2",                 # skip mock exam
        "b",                 # back from location
        "2",                 # skip again
        "3",
    ]
    info, location = run_onboarding_cli(input_fn=_scripted(answers))

    assert info.grade == "1"
    assert info.desired_field == "경영학"
    assert info.manual_academic_record.detailed_abilities == "경제 동아리 부장"
    assert location is None
