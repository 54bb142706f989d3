import json
import sys
from pathlib import Path

from ..intake.location import GeolocationError, ManualLocationProvider
from ..intake.schemas import StudentInfo
from .agent import AnalysisAgent, AnalysisError


def run_analysis_demo(student_path: str, coordinates: str = "") -> None:
    # 1. Load the questionnaire answers
    path = Path(student_path)
    if not path.exists():
        print(f"❌ {path} not found. Run the intake demo first!")
        return

    with path.open("r", encoding="utf-8") as f:
        info = StudentInfo.model_validate(json.load(f))

    # 2. Optional location
    location = None
    if coordinates:
        try:
            location = ManualLocationProvider(coordinates).get_location()
        except GeolocationError as e:
            print(f"⚠️ {e} Continuing without location.", file=sys.stderr)

    # 3. Run the analysis
    print("AI가 학생부를 정밀 분석 중입니다... 잠시만 기다려 주세요.", file=sys.stderr)
    try:
        report = AnalysisAgent().analyze(info, location)
    except AnalysisError as e:
        print(f"❌ 분석 중 오류 발생: {e}", file=sys.stderr)
        return

    # 4. Print the raw report (redirect to a file for the report demo)
    print(report.model_dump_json(indent=2))


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print("Usage: python -m admissions_navigator.analysis.cli_demo <student.json> [\"lat, lon\"]")
        sys.exit(1)
    run_analysis_demo(sys.argv[1], sys.argv[2] if len(sys.argv) > 2 else "")
