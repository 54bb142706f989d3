"""Shared fixtures: a fake Responses API client and a sample report."""

import json
from types import SimpleNamespace

import pytest


class FakeResponses:
    def __init__(self, outputs):
        self.outputs = list(outputs)
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        out = self.outputs.pop(0)
        if isinstance(out, Exception):
            raise out
        if isinstance(out, dict):
            out = json.dumps(out, ensure_ascii=False)
        return SimpleNamespace(output_text=out)


class FakeClient:
    """Stands in for ``openai.OpenAI``; only ``responses.create`` is used."""

    def __init__(self, *outputs):
        self.responses = FakeResponses(outputs)


@pytest.fixture
def fake_client():
    return FakeClient


@pytest.fixture
def report_data():
    return {
        "student_name": "김민준",
        "recommended_application_type": "학생부종합전형",
        "quantitative_analysis": {
            "gpa_z_scores": [
                {"subject": "국어", "z_score": 1.2},
                {"subject": "수학", "z_score": 0.8},
            ],
            "grade_trend": [
                {"semester": "1-1", "gpa": 2.5},
                {"semester": "1-2", "gpa": 2.1},
                {"semester": "2-1", "gpa": 1.9},
                {"semester": "2-2", "gpa": 1.7},
            ],
            "mock_exam_analysis": [
                {"subject": "수학", "strength": True, "comment": "미적분 응용 문항 정답률이 높음"},
                {"subject": "영어", "strength": False, "comment": "듣기 영역 실수가 반복됨"},
            ],
        },
        "qualitative_analysis": {
            "keyword_cloud": [
                {"text": "알고리즘", "value": 9},
                {"text": "협업", "value": 6},
            ],
            "competency_radar": [
                {"subject": "학업역량", "score": 4.5, "full_mark": 5},
                {"subject": "전공적합성", "score": 4, "full_mark": 5},
                {"subject": "인성", "score": 3.5, "full_mark": 5},
                {"subject": "발전가능성", "score": 4.2, "full_mark": 5},
            ],
        },
        "application_strategy": {
            "early_decision_probability": 70,
            "regular_decision_probability": 30,
        },
        "early_decision_recommendations": [
            {
                "category": "상향",
                "university": "서울대학교",
                "major": "컴퓨터공학부",
                "admission_type": "학생부종합(일반전형)",
                "acceptance_chance": 25,
                "rationale": "전공 관련 탐구 활동이 깊이 있게 기록되어 있음",
            },
            {
                "category": "적정",
                "university": "성균관대학교",
                "major": "소프트웨어학과",
                "admission_type": "학생부종합(계열모집)",
                "acceptance_chance": 55.5,
                "rationale": "내신 상승 추세가 긍정적으로 평가될 가능성",
            },
        ],
        "regular_decision_recommendations": [
            {
                "category": "안정",
                "university": "아주대학교",
                "major": "소프트웨어학과",
                "admission_type": "정시 가군",
                "acceptance_chance": 80,
                "rationale": "수학 백분위가 지난해 합격선보다 높음",
            },
        ],
        "local_support": {
            "weak_subject": "영어",
            "recommended_academies": [
                {"name": "대치 영어 전문학원", "distance": "1.2km", "rating": 4.6, "review_count": 132},
            ],
            "recommended_study_spaces": [
                {"name": "강남구립 도서관", "type": "Library", "distance": "800m", "rating": 4.3},
                {"name": "포커스 스터디카페", "type": "Study Cafe", "distance": "300m", "rating": 4.8},
            ],
        },
    }


@pytest.fixture
def report(report_data):
    from admissions_navigator.analysis.schemas import AnalysisReport

    return AnalysisReport.model_validate(report_data)
