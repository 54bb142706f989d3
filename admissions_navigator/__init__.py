"""Core package for the admissions navigator.

A four-step questionnaire collects a student's academic profile, one
structured request to a generative model turns it into an admissions
report, and the report is rendered as a three-tab dashboard.
"""

from .analysis.agent import AnalysisAgent  # re-export for convenience
from .extraction.agent import RecordExtractionAgent
from .intake.flow import OnboardingFlow

__all__ = ["AnalysisAgent", "OnboardingFlow", "RecordExtractionAgent"]
