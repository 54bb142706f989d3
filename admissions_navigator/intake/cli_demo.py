"""Terminal front end for the onboarding questionnaire.

Not meant to be production-facing; it drives :class:`OnboardingFlow`
step by step so the whole pipeline can be exercised without a browser.
"""

from __future__ import annotations

from typing import Callable, Optional, Tuple

from .files import UnsupportedImageError, load_image_payload
from .flow import IncompleteStepError, OnboardingFlow, OnboardingState, RecordExtractor, RecordInputType, Step
from .location import DeniedLocationProvider, IpLocationProvider, ManualLocationProvider
from .schemas import Location, StudentInfo


InputFn = Callable[[str], str]

RECORD_PROMPTS = [
    ("detailed_abilities", "세부능력 및 특기사항 (과목별 성취, 탐구활동 등)"),
    ("creative_activities", "창의적 체험활동 (동아리, 자율, 봉사, 진로활동)"),
    ("behavioral_characteristics", "행동특성 및 종합의견 (담임교사 의견)"),
    ("awards", "수상경력"),
    ("reading_activities", "독서활동상황"),
]

MOCK_EXAM_PROMPTS = [
    ("korean", "국어"),
    ("math", "수학"),
    ("english", "영어 (등급)"),
    ("inquiry1", "탐구 1"),
    ("inquiry2", "탐구 2"),
]


class OnboardingCancelled(Exception):
    pass


def _ask(input_fn: InputFn, prompt: str) -> str:
    answer = input_fn(prompt).strip()
    if answer.lower() in {"exit", "quit"}:
        raise OnboardingCancelled()
    return answer


def _print_state(state: OnboardingState) -> None:
    if state.extracting:
        print("AI가 이미지를 분석하여 텍스트를 추출하고 있습니다... 잠시만 기다려주세요.")
    elif state.error:
        print(f"❌ {state.error}")


def _basic_info(flow: OnboardingFlow, input_fn: InputFn) -> None:
    print("\n=== 기본 정보 입력 ===")
    print("자녀의 학년과 희망 계열을 알려주세요.")
    while True:
        current = flow.state.info.grade
        grade = _ask(input_fn, f"학년 (1/2/3{', Enter = ' + current if current else ''}): ") or current
        if grade in {"1", "2", "3"}:
            break
        print("1, 2, 3 중에서 입력해주세요.")
    flow.update_basic_info(grade=grade)

    while True:
        current = flow.state.info.desired_field
        prompt = f"희망 계열 (Enter = {current}): " if current.strip() else "희망 계열 (예: 컴퓨터공학, 의예과): "
        answer = _ask(input_fn, prompt)
        if answer:
            flow.update_basic_info(desired_field=answer)
        if flow.state.can_advance:
            break
    flow.next_step()


def _manual_record(flow: OnboardingFlow, input_fn: InputFn) -> None:
    record = flow.state.info.manual_academic_record
    if flow.state.info.academic_record_image is not None:
        print("✅ AI 추출 완료! 추출된 내용을 검토하고, 수정할 항목만 새로 입력하세요 (Enter = 유지).")
    else:
        print("학생부의 핵심 내용을 요약하여 입력해주세요 (Enter = 비워두기).")

    for name, label in RECORD_PROMPTS:
        current = getattr(record, name) if record is not None else ""
        if current:
            print(f"[{label}] {current}")
        answer = _ask(input_fn, f"{label}: ")
        if answer:
            flow.update_manual_record(**{name: answer})


def _academic_record(flow: OnboardingFlow, input_fn: InputFn, extractor: Optional[RecordExtractor]) -> None:
    """Ends on the next step, or on the previous one if the user typed 'b'."""
    print("\n=== 학생 생활기록부 ===")
    if flow.state.can_advance:
        # Revisited from a later step.
        _manual_record(flow, input_fn)

    while not flow.state.can_advance:
        if flow.state.record_input is None:
            choice = _ask(input_fn, "어떻게 입력하시겠어요? (1) 이미지 파일 업로드  (2) 직접 입력하기  (b) 이전 단계: ")
            if choice == "1":
                flow.choose_image_upload()
            elif choice == "2":
                flow.choose_manual_entry()
            elif choice.lower() == "b":
                flow.previous_step()
                return
            continue

        if flow.state.record_input == RecordInputType.IMAGE:
            path = _ask(input_fn, "이미지 파일 경로 (PNG, JPG, WEBP; 'manual' = 직접 입력, 'b' = 이전 단계): ")
            if path.lower() == "b":
                flow.previous_step()
                return
            if path.lower() == "manual":
                flow.choose_manual_entry()
                continue
            if extractor is None:
                print("이미지 분석을 사용할 수 없습니다. 직접 입력해주세요.")
                flow.choose_manual_entry()
                continue
            try:
                image = load_image_payload(path)
            except (OSError, UnsupportedImageError) as e:
                print(f"❌ {e}")
                continue
            flow.upload_image(image, extractor)
            if flow.state.record_input == RecordInputType.MANUAL:
                # Review the extracted text before moving on.
                _manual_record(flow, input_fn)
            continue

        _manual_record(flow, input_fn)
        if not flow.state.can_advance:
            print("최소 한 항목은 입력해야 합니다.")

    flow.next_step()


def _mock_exam(flow: OnboardingFlow, input_fn: InputFn) -> None:
    print("\n=== 최근 모의고사 성적 ===")
    print("가장 최근 모의고사 성적의 백분위 또는 표준점수를 입력해주세요.")
    choice = _ask(input_fn, "(1) 입력하기  (2) 건너뛰기  (b) 이전 단계: ")
    if choice.lower() == "b":
        flow.previous_step()
        return
    if choice == "2":
        print("모의고사 성적 입력을 건너뜁니다. AI가 학생 생활기록부 내용을 바탕으로 학업 수준을 추정합니다.")
        flow.skip_mock_exam()
        return

    while True:
        for name, label in MOCK_EXAM_PROMPTS:
            answer = _ask(input_fn, f"{label}: ")
            if answer:
                flow.update_mock_exam(**{name: answer})
        if flow.state.can_advance:
            break
        print("다섯 과목을 모두 입력해주세요.")
    flow.next_step()


def _location(flow: OnboardingFlow, input_fn: InputFn) -> bool:
    """Returns False if the user went back instead of answering."""
    print("\n=== 위치 정보 동의 (선택) ===")
    print("더 정확한 주변 학원 및 학습 공간 추천을 위해 위치 정보를 제공하시겠어요?")
    choice = _ask(input_fn, "(1) 현재 위치 자동 확인  (2) 좌표 직접 입력  (3) 동의하지 않음  (b) 이전 단계: ")
    if choice.lower() == "b":
        flow.previous_step()
        return False
    if choice == "1":
        provider = IpLocationProvider()
    elif choice == "2":
        provider = ManualLocationProvider(_ask(input_fn, "위도, 경도: "))
    else:
        provider = DeniedLocationProvider()

    flow.request_location(provider)
    if flow.state.notice:
        print(flow.state.notice)
    return True


def run_onboarding_cli(
    extractor: Optional[RecordExtractor] = None,
    input_fn: InputFn = input,
) -> Optional[Tuple[StudentInfo, Optional[Location]]]:
    """Run the questionnaire; returns ``None`` if the user typed exit/quit."""
    flow = OnboardingFlow()
    flow.subscribe(_print_state)

    try:
        while True:
            step = flow.state.step
            print(f"\n[{step}/{len(Step)}] 진행률 {flow.state.progress:.0f}%")
            if step == Step.BASIC_INFO:
                _basic_info(flow, input_fn)
            elif step == Step.ACADEMIC_RECORD:
                _academic_record(flow, input_fn, extractor)
            elif step == Step.MOCK_EXAM:
                _mock_exam(flow, input_fn)
            elif _location(flow, input_fn):
                break
    except OnboardingCancelled:
        return None
    except IncompleteStepError as e:
        print(f"❌ {e}")
        return None

    print("\n입력이 완료되었습니다.")
    return flow.complete()


if __name__ == "__main__":
    from ..extraction import RecordExtractionAgent

    result = run_onboarding_cli(extractor=RecordExtractionAgent())
    if result is not None:
        info, location = result
        print(info.model_dump_json(indent=2))
        print(location)
