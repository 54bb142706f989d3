"""Report models and the JSON schema the model must answer with.

The pydantic models validate the parsed output; the hand-written schema
is what gets sent as the structured-output format. Keep the two in sync.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List

from pydantic import BaseModel, Field


class RiskCategory(str, Enum):
    REACH = "상향"
    MATCH = "적정"
    SAFE = "안정"


class StudySpaceType(str, Enum):
    LIBRARY = "Library"
    STUDY_CAFE = "Study Cafe"


# --- quantitative ---

class SubjectZScore(BaseModel):
    subject: str
    z_score: float


class GradeTrendPoint(BaseModel):
    semester: str
    gpa: float = Field(..., description="내신 등급 (1 = best, 5 = worst)")


class MockExamComment(BaseModel):
    subject: str
    strength: bool
    comment: str


class QuantitativeAnalysis(BaseModel):
    gpa_z_scores: List[SubjectZScore] = Field(default_factory=list)
    grade_trend: List[GradeTrendPoint] = Field(default_factory=list)
    mock_exam_analysis: List[MockExamComment] = Field(default_factory=list)


# --- qualitative ---

class Keyword(BaseModel):
    text: str
    value: float = Field(..., description="Importance weight for the desired field")


class CompetencyScore(BaseModel):
    subject: str
    score: float
    full_mark: float = 5


class QualitativeAnalysis(BaseModel):
    keyword_cloud: List[Keyword] = Field(default_factory=list)
    competency_radar: List[CompetencyScore] = Field(default_factory=list)


# --- strategy ---

class ApplicationStrategy(BaseModel):
    early_decision_probability: float
    regular_decision_probability: float


class UniversityRecommendation(BaseModel):
    category: RiskCategory
    university: str
    major: str
    admission_type: str
    acceptance_chance: float = Field(..., description="Estimated chance of acceptance in percent")
    rationale: str


# --- local support ---

class Academy(BaseModel):
    name: str
    distance: str
    rating: float
    review_count: int


class StudySpace(BaseModel):
    name: str
    type: StudySpaceType
    distance: str
    rating: float


class LocalSupport(BaseModel):
    weak_subject: str
    recommended_academies: List[Academy] = Field(default_factory=list)
    recommended_study_spaces: List[StudySpace] = Field(default_factory=list)


class AnalysisReport(BaseModel):
    student_name: str
    recommended_application_type: str
    quantitative_analysis: QuantitativeAnalysis
    qualitative_analysis: QualitativeAnalysis
    application_strategy: ApplicationStrategy
    early_decision_recommendations: List[UniversityRecommendation] = Field(default_factory=list)
    regular_decision_recommendations: List[UniversityRecommendation] = Field(default_factory=list)
    local_support: LocalSupport


# --- structured output schema ---

def _object(properties: Dict[str, Any]) -> Dict[str, Any]:
    # Strict mode wants every object closed and every property required.
    return {
        "type": "object",
        "additionalProperties": False,
        "properties": properties,
        "required": list(properties),
    }


def _array_of(properties: Dict[str, Any]) -> Dict[str, Any]:
    return {"type": "array", "items": _object(properties)}


RECOMMENDATION_SCHEMA: Dict[str, Any] = _array_of(
    {
        "category": {"type": "string", "enum": [c.value for c in RiskCategory]},
        "university": {"type": "string"},
        "major": {"type": "string"},
        "admission_type": {"type": "string"},
        "acceptance_chance": {"type": "number"},
        "rationale": {"type": "string"},
    }
)


ANALYSIS_REPORT_SCHEMA: Dict[str, Any] = _object(
    {
        "student_name": {"type": "string"},
        "recommended_application_type": {"type": "string"},
        "quantitative_analysis": _object(
            {
                "gpa_z_scores": _array_of({"subject": {"type": "string"}, "z_score": {"type": "number"}}),
                "grade_trend": _array_of({"semester": {"type": "string"}, "gpa": {"type": "number"}}),
                "mock_exam_analysis": _array_of(
                    {
                        "subject": {"type": "string"},
                        "strength": {"type": "boolean"},
                        "comment": {"type": "string"},
                    }
                ),
            }
        ),
        "qualitative_analysis": _object(
            {
                "keyword_cloud": _array_of({"text": {"type": "string"}, "value": {"type": "number"}}),
                "competency_radar": _array_of(
                    {
                        "subject": {"type": "string"},
                        "score": {"type": "number"},
                        "full_mark": {"type": "number"},
                    }
                ),
            }
        ),
        "application_strategy": _object(
            {
                "early_decision_probability": {"type": "number"},
                "regular_decision_probability": {"type": "number"},
            }
        ),
        "early_decision_recommendations": RECOMMENDATION_SCHEMA,
        "regular_decision_recommendations": RECOMMENDATION_SCHEMA,
        "local_support": _object(
            {
                "weak_subject": {"type": "string"},
                "recommended_academies": _array_of(
                    {
                        "name": {"type": "string"},
                        "distance": {"type": "string"},
                        "rating": {"type": "number"},
                        "review_count": {"type": "integer"},
                    }
                ),
                "recommended_study_spaces": _array_of(
                    {
                        "name": {"type": "string"},
                        "type": {"type": "string", "enum": [t.value for t in StudySpaceType]},
                        "distance": {"type": "string"},
                        "rating": {"type": "number"},
                    }
                ),
            }
        ),
    }
)
