import json
import sys
from pathlib import Path
from typing import Callable

from ..analysis.schemas import AnalysisReport
from .views import TABS, render_tab


def show_report(report: AnalysisReport, input_fn: Callable[[str], str] = input) -> None:
    """Print the dashboard tab, then let the user switch tabs until they quit."""
    tab_id = "dashboard"
    menu = "  ".join(f"({i}) {t['label']}" for i, t in enumerate(TABS, 1))

    while True:
        print()
        print(render_tab(report, tab_id))
        print(f"\n{menu}  (q) 닫기")
        choice = input_fn("> ").strip().lower()
        if choice in {"q", "quit", "exit", ""}:
            return
        if choice.isdigit() and 1 <= int(choice) <= len(TABS):
            tab_id = TABS[int(choice) - 1]["id"]


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print("Usage: python -m admissions_navigator.report.cli_demo <report.json>")
        sys.exit(1)

    path = Path(sys.argv[1])
    if not path.exists():
        print(f"❌ {path} not found. Run the analysis demo first!")
        sys.exit(1)

    with path.open("r", encoding="utf-8") as f:
        show_report(AnalysisReport.model_validate(json.load(f)))
