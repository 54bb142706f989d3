"""Admissions analysis: one structured prompt in, one typed report out."""

from .agent import AnalysisAgent, AnalysisError
from .schemas import AnalysisReport, RiskCategory

__all__ = ["AnalysisAgent", "AnalysisError", "AnalysisReport", "RiskCategory"]
