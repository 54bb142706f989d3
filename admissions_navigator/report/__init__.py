"""Terminal and chart-data views of an analysis report."""

from .views import TABS, render_tab

__all__ = ["TABS", "render_tab"]
