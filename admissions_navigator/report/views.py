"""Dashboard views for an :class:`AnalysisReport`.

Chart helpers return plain series data for whatever charting front end is
in use; the ``render_*`` functions produce the terminal rendering of each
tab. Report values are shown as-is, never recomputed.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from ..analysis.schemas import AnalysisReport, RiskCategory, StudySpaceType, UniversityRecommendation


TABS: List[Dict[str, str]] = [
    {"id": "dashboard", "label": "종합 대시보드"},
    {"id": "strategy", "label": "맞춤 합격 전략"},
    {"id": "local", "label": "지역 학업 지원"},
]

TAB_IDS = [t["id"] for t in TABS]

PIE_COLORS = ["#0088FE", "#00C49F"]

CATEGORY_STYLES = {
    RiskCategory.REACH: "red",
    RiskCategory.MATCH: "yellow",
    RiskCategory.SAFE: "green",
}

STUDY_SPACE_LABELS = {
    StudySpaceType.LIBRARY: "도서관",
    StudySpaceType.STUDY_CAFE: "스터디 카페",
}


def _num(value: float) -> str:
    """Whole numbers without a trailing .0, everything else as given."""
    return str(int(value)) if float(value).is_integer() else str(value)


# --- chart data ---

def application_pie_data(report: Optional[AnalysisReport]) -> List[Dict[str, Any]]:
    strategy = report.application_strategy if report is not None else None
    return [
        {"name": "수시", "value": strategy.early_decision_probability if strategy else 50},
        {"name": "정시", "value": strategy.regular_decision_probability if strategy else 50},
    ]


def grade_trend_series(report: AnalysisReport) -> List[Dict[str, Any]]:
    # Korean GPA grades run 1 (best) to 5, so front ends plot this axis reversed.
    return [p.model_dump() for p in report.quantitative_analysis.grade_trend]


def competency_radar_series(report: AnalysisReport) -> List[Dict[str, Any]]:
    return [c.model_dump() for c in report.qualitative_analysis.competency_radar]


def keyword_cloud_sizes(report: AnalysisReport) -> List[Dict[str, Any]]:
    return [
        {
            "text": k.text,
            "font_size": 10 + k.value * 1.5,
            "opacity": min(1.0, 0.6 + k.value * 0.04),
        }
        for k in report.qualitative_analysis.keyword_cloud
    ]


def category_style(category: RiskCategory) -> str:
    return CATEGORY_STYLES.get(category, "gray")


def star_rating(rating: float, out_of: int = 5) -> str:
    filled = max(0, min(out_of, int(rating + 0.5)))
    return "★" * filled + "☆" * (out_of - filled)


# --- text rendering ---

def render_recommendation_card(rec: UniversityRecommendation) -> str:
    return "\n".join(
        [
            f"[{rec.category.value}] {rec.university} - {rec.major}",
            f"  {rec.admission_type}",
            f"  예상 합격률: {_num(rec.acceptance_chance)}%",
            f"  {rec.rationale}",
        ]
    )


def render_dashboard(report: AnalysisReport) -> str:
    lines = ["=== 핵심 진단 요약 ==="]
    lines.append(f"{report.student_name or '학생'}, {report.recommended_application_type or '분석 결과'}이 유리합니다.")

    lines.append("\n=== 수시 vs 정시 유불리 ===")
    for slice_ in application_pie_data(report):
        lines.append(f"{slice_['name']}: {_num(slice_['value'])}%")

    lines.append("\n=== 내신 성적 추이 (GPA) ===")
    for point in report.quantitative_analysis.grade_trend:
        lines.append(f"{point.semester}: {_num(point.gpa)}")

    lines.append("\n=== 과목별 Z-점수 ===")
    for z in report.quantitative_analysis.gpa_z_scores:
        lines.append(f"{z.subject}: {_num(z.z_score)}")

    lines.append("\n=== 모의고사 분석 ===")
    for m in report.quantitative_analysis.mock_exam_analysis:
        marker = "강점" if m.strength else "약점"
        lines.append(f"{m.subject} ({marker}): {m.comment}")

    lines.append("\n=== 4대 역량 분석 ===")
    for c in report.qualitative_analysis.competency_radar:
        lines.append(f"{c.subject}: {_num(c.score)}/{_num(c.full_mark)}")

    lines.append("\n=== 학생부 키워드 클라우드 ===")
    lines.append(", ".join(f"{k.text}({_num(k.value)})" for k in report.qualitative_analysis.keyword_cloud))
    return "\n".join(lines)


def render_strategy(report: AnalysisReport) -> str:
    lines = ["=== 수시 6카드 추천 ==="]
    lines.extend(render_recommendation_card(r) for r in report.early_decision_recommendations)
    lines.append("\n=== 정시 3카드 추천 ===")
    lines.extend(render_recommendation_card(r) for r in report.regular_decision_recommendations)
    return "\n".join(lines)


def render_local_support(report: AnalysisReport) -> str:
    support = report.local_support
    lines = [
        "=== 지역 기반 학업 지원 솔루션 ===",
        f"AI 분석 결과, {report.student_name} 학생은 {support.weak_subject} 보완이 시급합니다.",
        "\n--- 약점 보완 전문 학원 추천 ---",
    ]
    for a in support.recommended_academies:
        lines.append(f"{a.name} ({a.distance}) {star_rating(a.rating)} ({_num(a.rating)}, 리뷰 {a.review_count})")

    lines.append("\n--- 학습 공간 추천 ---")
    for s in support.recommended_study_spaces:
        label = STUDY_SPACE_LABELS.get(s.type, s.type.value)
        lines.append(f"{s.name} [{label}] ({s.distance}) {star_rating(s.rating)} ({_num(s.rating)})")
    return "\n".join(lines)


_RENDERERS = {
    "dashboard": render_dashboard,
    "strategy": render_strategy,
    "local": render_local_support,
}


def render_tab(report: AnalysisReport, tab_id: str) -> str:
    try:
        renderer = _RENDERERS[tab_id]
    except KeyError:
        raise ValueError(f"Unknown tab {tab_id!r}; expected one of {', '.join(TAB_IDS)}") from None
    return renderer(report)
