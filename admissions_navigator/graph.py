import logging
from typing import Any, Callable, Optional, Tuple, TypedDict

from langgraph.graph import StateGraph, END
from dotenv import load_dotenv

from .analysis.agent import AnalysisAgent, AnalysisError
from .analysis.schemas import AnalysisReport
from .intake.cli_demo import run_onboarding_cli
from .intake.schemas import Location, StudentInfo
from .report.cli_demo import show_report

logger = logging.getLogger('admissions_navigator_graph')

load_dotenv()


# --- 1. Define Graph State ---
class NavigatorState(TypedDict):
    step: str  # WELCOME | ONBOARDING | ANALYZING | REPORT | ERROR | CANCELLED
    student_info: Optional[StudentInfo]
    location: Optional[Location]
    report: Optional[AnalysisReport]
    error: Optional[str]


def initial_state() -> NavigatorState:
    return {
        "step": "WELCOME",
        "student_info": None,
        "location": None,
        "report": None,
        "error": None,
    }


CollectFn = Callable[[], Optional[Tuple[StudentInfo, Optional[Location]]]]
ShowReportFn = Callable[[AnalysisReport], None]


# --- 2. Build the Graph ---

def route_onboarding(state: NavigatorState) -> str:
    return "analyzing" if state.get("step") == "ANALYZING" else "cancelled"


def route_analysis(state: NavigatorState) -> str:
    """A report goes to the dashboard; anything else is the terminal error state."""
    return "report" if state.get("report") is not None else "error"


def build_navigator_graph(
    collect: Optional[CollectFn] = None,
    analysis_agent: Any = None,
    show: Optional[ShowReportFn] = None,
):
    """Wire WELCOME -> ONBOARDING -> ANALYZING -> REPORT | ERROR.

    ``collect``, ``analysis_agent`` and ``show`` default to the interactive
    terminal pieces; tests pass stand-ins.
    """

    def welcome_node(state: NavigatorState) -> NavigatorState:
        print("\n=== 입시 네비게이터 AI ===")
        print("자녀의 학생부를 기반으로 정확한 진단과 맞춤형 합격 전략을 제공합니다.")
        return {**state, "step": "ONBOARDING"}

    def onboarding_node(state: NavigatorState) -> NavigatorState:
        logger.info("Entering Onboarding Node")
        if collect is not None:
            result = collect()
        else:
            from .extraction import RecordExtractionAgent

            result = run_onboarding_cli(extractor=RecordExtractionAgent())

        if result is None:
            return {**state, "step": "CANCELLED"}
        info, location = result
        return {**state, "step": "ANALYZING", "student_info": info, "location": location}

    def analyzing_node(state: NavigatorState) -> NavigatorState:
        logger.info("Entering Analyzing Node")
        print("\nAI가 학생부를 정밀 분석 중입니다... 잠시만 기다려 주세요. (이미지 분석 시 1-2분 소요)")
        try:
            agent = analysis_agent or AnalysisAgent()
            report = agent.analyze(state["student_info"], state.get("location"))
        except AnalysisError as e:
            logger.warning(f"Analysis failed: {e}")
            return {**state, "step": "ERROR", "report": None, "error": str(e)}
        return {**state, "step": "REPORT", "report": report, "error": None}

    def report_node(state: NavigatorState) -> NavigatorState:
        (show or show_report)(state["report"])
        return state

    def error_node(state: NavigatorState) -> NavigatorState:
        print("\n❌ 분석 중 오류 발생")
        print(state.get("error") or "An unknown error occurred.")
        return state

    builder = StateGraph(NavigatorState)

    builder.add_node("welcome", welcome_node)
    builder.add_node("onboarding", onboarding_node)
    builder.add_node("analyzing", analyzing_node)
    builder.add_node("report", report_node)
    builder.add_node("error", error_node)

    builder.set_entry_point("welcome")
    builder.add_edge("welcome", "onboarding")
    builder.add_conditional_edges(
        "onboarding",
        route_onboarding,
        {"analyzing": "analyzing", "cancelled": END},
    )
    builder.add_conditional_edges(
        "analyzing",
        route_analysis,
        {"report": "report", "error": "error"},
    )
    builder.add_edge("report", END)
    builder.add_edge("error", END)

    return builder.compile()


# --- 3. Execution Helper ---

def run_pipeline() -> None:
    graph = build_navigator_graph()

    while True:
        final_state = graph.invoke(initial_state())

        if final_state.get("step") == "CANCELLED":
            print("Goodbye!")
            return

        # No retry from the error state; the only way forward is a restart.
        prompt = "처음으로 돌아가기? (y/n): " if final_state.get("step") == "ERROR" else "다시 시작하기? (y/n): "
        if input(prompt).strip().lower() not in {"y", "yes"}:
            print("Goodbye!")
            return


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    run_pipeline()
