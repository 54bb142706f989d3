"""Tests for the top-level LangGraph pipeline."""

from admissions_navigator.analysis.agent import ANALYSIS_FAILURE_MESSAGE, AnalysisError
from admissions_navigator.graph import build_navigator_graph, initial_state
from admissions_navigator.intake.schemas import StudentInfo


class StubAnalysisAgent:
    def __init__(self, report=None):
        self.report = report

    def analyze(self, info, location=None):
        if self.report is None:
            raise AnalysisError("Failed to get analysis from AI. Please try again later.")
        return self.report


INFO = StudentInfo(grade="2", desired_field="컴퓨터공학")


def test_pipeline_reaches_report(report):
    shown = []
    graph = build_navigator_graph(
        collect=lambda: (INFO, None),
        analysis_agent=StubAnalysisAgent(report),
        show=shown.append,
    )
    final = graph.invoke(initial_state())

    assert final["step"] == "REPORT"
    assert final["report"] == report
    assert final["error"] is None
    assert shown == [report]


def test_pipeline_error_state(capsys):
    shown = []
    graph = build_navigator_graph(
        collect=lambda: (INFO, None),
        analysis_agent=StubAnalysisAgent(),
        show=shown.append,
    )
    final = graph.invoke(initial_state())

    assert final["step"] == "ERROR"
    assert final["report"] is None
    assert final["error"] == "Failed to get analysis from AI. Please try again later."
    assert shown == []
    assert "분석 중 오류 발생" in capsys.readouterr().out


def test_pipeline_cancelled():
    graph = build_navigator_graph(collect=lambda: None, analysis_agent=StubAnalysisAgent(), show=print)
    final = graph.invoke(initial_state())
    assert final["step"] == "CANCELLED"
    assert final["student_info"] is None


def test_pipeline_without_credentials_ends_in_error(monkeypatch):
    """A missing API key is a model failure: the run ends in ERROR, not a crash."""
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    graph = build_navigator_graph(collect=lambda: (INFO, None), show=print)
    final = graph.invoke(initial_state())

    assert final["step"] == "ERROR"
    assert final["error"] == ANALYSIS_FAILURE_MESSAGE
