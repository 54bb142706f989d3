"""Onboarding questionnaire: an explicit state struct plus transitions.

:class:`OnboardingFlow` keeps no hidden state beyond :class:`OnboardingState`.
Every transition replaces ``flow.state`` with an updated copy and notifies
subscribers, so a front end can render each intermediate state (e.g. the
busy indicator while an uploaded image is being read).

Step completion is decided by one validator table, :data:`STEP_VALIDATORS`,
shared by the flow, the terminal demo and the HTTP API.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from enum import Enum, IntEnum
from typing import Callable, Dict, List, Optional, Protocol, Tuple

from ..extraction.agent import EXTRACTION_FAILURE_MESSAGE, ExtractionError
from .location import GeolocationError, LocationProvider
from .schemas import ImagePayload, Location, ManualAcademicRecord, StudentInfo


logger = logging.getLogger(__name__)


class Step(IntEnum):
    BASIC_INFO = 1
    ACADEMIC_RECORD = 2
    MOCK_EXAM = 3
    LOCATION = 4


TOTAL_STEPS = len(Step)


class RecordInputType(str, Enum):
    IMAGE = "image"
    MANUAL = "manual"


class IncompleteStepError(ValueError):
    """Raised when a transition is attempted from a step that isn't done."""


class RecordExtractor(Protocol):
    def extract(self, image: ImagePayload) -> Tuple[str, ManualAcademicRecord]:  # pragma: no cover - interface only
        ...


def _basic_info_complete(info: StudentInfo) -> bool:
    return info.grade != "" and bool(info.desired_field.strip())


def _academic_record_complete(info: StudentInfo) -> bool:
    # Counts only once the record fields hold something, whether they came
    # from image extraction or were typed in.
    record = info.manual_academic_record
    return record is not None and record.has_content()


def _mock_exam_complete(info: StudentInfo) -> bool:
    return info.mock_exam.all_filled()


def _location_complete(info: StudentInfo) -> bool:
    return True


STEP_VALIDATORS: Dict[Step, Callable[[StudentInfo], bool]] = {
    Step.BASIC_INFO: _basic_info_complete,
    Step.ACADEMIC_RECORD: _academic_record_complete,
    Step.MOCK_EXAM: _mock_exam_complete,
    Step.LOCATION: _location_complete,
}


def is_step_complete(step: Step, info: StudentInfo) -> bool:
    return STEP_VALIDATORS[Step(step)](info)


def step_completion(info: StudentInfo) -> Dict[Step, bool]:
    return {step: check(info) for step, check in STEP_VALIDATORS.items()}


LOCATION_SUCCESS_NOTICE = "위치 정보가 성공적으로 수집되었습니다."
LOCATION_FAILURE_NOTICE = "위치 정보를 가져오는데 실패했습니다. 지역 기반 추천은 일반적인 조언으로 대체됩니다."


@dataclass(frozen=True)
class OnboardingState:
    step: Step = Step.BASIC_INFO
    info: StudentInfo = field(default_factory=StudentInfo)
    record_input: Optional[RecordInputType] = None
    extracting: bool = False
    error: Optional[str] = None
    location: Optional[Location] = None
    notice: Optional[str] = None

    @property
    def progress(self) -> float:
        return self.step / TOTAL_STEPS * 100

    @property
    def can_advance(self) -> bool:
        return not self.extracting and is_step_complete(self.step, self.info)


class OnboardingFlow:
    """Drives the four-step questionnaire."""

    def __init__(self, state: Optional[OnboardingState] = None) -> None:
        self.state = state or OnboardingState()
        self._listeners: List[Callable[[OnboardingState], None]] = []

    def subscribe(self, listener: Callable[[OnboardingState], None]) -> None:
        self._listeners.append(listener)

    def _set(self, **changes) -> OnboardingState:
        self.state = replace(self.state, **changes)
        for listener in self._listeners:
            listener(self.state)
        return self.state

    def _set_info(self, **changes) -> OnboardingState:
        return self._set(info=self.state.info.model_copy(update=changes))

    # --- field updates ---

    def update_basic_info(self, **fields) -> OnboardingState:
        allowed = {"grade", "desired_field", "student_name", "academic_record"}
        unknown = set(fields) - allowed
        if unknown:
            raise TypeError(f"Unknown field(s): {', '.join(sorted(unknown))}")
        # Run through the model so the grade literal is validated.
        data = self.state.info.model_dump()
        data.update(fields)
        return self._set(info=StudentInfo.model_validate(data))

    def update_mock_exam(self, **scores: str) -> OnboardingState:
        mock_exam = self.state.info.mock_exam.model_copy(update=self._known(scores, self.state.info.mock_exam))
        return self._set_info(mock_exam=mock_exam)

    def update_manual_record(self, **fields: str) -> OnboardingState:
        record = self.state.info.manual_academic_record
        if record is None:
            # Nothing to edit until manual entry is chosen or extraction succeeded.
            return self.state
        return self._set_info(manual_academic_record=record.model_copy(update=self._known(fields, record)))

    @staticmethod
    def _known(fields: Dict[str, str], model) -> Dict[str, str]:
        unknown = set(fields) - set(type(model).model_fields)
        if unknown:
            raise TypeError(f"Unknown field(s): {', '.join(sorted(unknown))}")
        return fields

    # --- academic record sub-state ---

    def choose_image_upload(self) -> OnboardingState:
        return self._set(record_input=RecordInputType.IMAGE, error=None)

    def choose_manual_entry(self) -> OnboardingState:
        info = self.state.info.model_copy(update={"manual_academic_record": ManualAcademicRecord()})
        return self._set(info=info, record_input=RecordInputType.MANUAL, error=None)

    def clear_image(self) -> OnboardingState:
        return self._set_info(academic_record_image=None)

    def upload_image(self, image: ImagePayload, extractor: RecordExtractor) -> OnboardingState:
        """Store the image and pre-fill the manual record from it.

        Emits an ``extracting`` state first; ends in the manual-record
        sub-state on success, or back in the image sub-state with
        ``error`` set on failure.
        """
        self._set(
            info=self.state.info.model_copy(update={"academic_record_image": image}),
            record_input=RecordInputType.IMAGE,
            extracting=True,
            error=None,
        )

        try:
            student_name, record = extractor.extract(image)
        except ExtractionError as e:
            logger.warning("Record extraction failed: %s", e)
            return self._set(record_input=RecordInputType.IMAGE, extracting=False, error=str(e) or EXTRACTION_FAILURE_MESSAGE)
        except Exception:
            # The busy state must always clear, whatever the extractor raised.
            logger.exception("Record extractor raised an unexpected error")
            return self._set(record_input=RecordInputType.IMAGE, extracting=False, error=EXTRACTION_FAILURE_MESSAGE)

        info = self.state.info.model_copy(update={"student_name": student_name, "manual_academic_record": record})
        return self._set(info=info, record_input=RecordInputType.MANUAL, extracting=False)

    # --- navigation ---

    def next_step(self) -> OnboardingState:
        if self.state.step == Step.LOCATION:
            raise IncompleteStepError("Already on the last step; call complete() instead.")
        if not self.state.can_advance:
            raise IncompleteStepError(f"Step {self.state.step.name} is not complete.")
        return self._set(step=Step(self.state.step + 1), error=None)

    def previous_step(self) -> OnboardingState:
        if self.state.step == Step.BASIC_INFO:
            return self.state
        return self._set(step=Step(self.state.step - 1), error=None)

    def skip_mock_exam(self) -> OnboardingState:
        """Move past the mock-exam step without scores.

        The analysis then estimates regular-decision performance from the
        academic record.
        """
        if self.state.step != Step.MOCK_EXAM:
            raise IncompleteStepError("Mock exam can only be skipped from the mock exam step.")
        return self._set(step=Step.LOCATION, error=None)

    # --- location ---

    def request_location(self, provider: LocationProvider) -> OnboardingState:
        try:
            location = provider.get_location()
        except GeolocationError as e:
            logger.info("Location unavailable: %s", e)
            return self._set(location=None, notice=LOCATION_FAILURE_NOTICE)
        return self._set(location=location, notice=LOCATION_SUCCESS_NOTICE)

    def complete(self) -> Tuple[StudentInfo, Optional[Location]]:
        if self.state.step != Step.LOCATION:
            raise IncompleteStepError("The questionnaire is not finished yet.")
        return self.state.info.model_copy(deep=True), self.state.location
