"""Academic-record extraction.

Reads an uploaded image of the student's record and returns the student's
name plus the five record sections, ready to pre-fill the manual-entry form.
"""

from .agent import ExtractionError, RecordExtractionAgent

__all__ = ["ExtractionError", "RecordExtractionAgent"]
