"""Leaf components of the analysis demo."""
from .contracts import AnalysisRequest, AnalysisResult, Verdict
from .input_store import SAMPLE_TEXTS, InputStore, sample_previews
from .verdict_presenter import PresentationAttributes, present, present_state

__all__ = [
    "AnalysisRequest", "AnalysisResult", "Verdict",
    "SAMPLE_TEXTS", "InputStore", "sample_previews",
    "PresentationAttributes", "present", "present_state",
]
