"""
Verdict presentation: pure mapping from a settled result to display attributes.

Attributes are semantic (label, color category, icon name, bar width) and leave
rendering to the caller.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, Optional, Tuple

from truthcheck.components.contracts import AnalysisResult, Verdict

if TYPE_CHECKING:
    from truthcheck.analysis.lifecycle import RequestState


@dataclass(frozen=True)
class VerdictStyle:
    label: str
    color_class: str
    icon: str


VERDICT_STYLES: Dict[str, VerdictStyle] = {
    Verdict.REAL.value: VerdictStyle("Likely Authentic", "success", "check-circle"),
    Verdict.FAKE.value: VerdictStyle("Likely Misinformation", "destructive", "x-circle"),
    Verdict.UNCERTAIN.value: VerdictStyle("Uncertain", "warning", "alert-triangle"),
}
DEFAULT_STYLE = VERDICT_STYLES[Verdict.UNCERTAIN.value]


@dataclass(frozen=True)
class PresentationAttributes:
    label: str
    color_class: str
    icon: str
    confidence_bar_width: int
    bar_color_class: str
    confidence_text: str
    explanation: str
    red_flags: Tuple[str, ...]

    @property
    def show_red_flags(self) -> bool:
        return bool(self.red_flags)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "label": self.label,
            "color_class": self.color_class,
            "icon": self.icon,
            "confidence_bar_width": self.confidence_bar_width,
            "bar_color_class": self.bar_color_class,
            "confidence_text": self.confidence_text,
            "explanation": self.explanation,
            "red_flags": list(self.red_flags),
            "show_red_flags": self.show_red_flags,
        }


def _verdict_key(verdict: Any) -> str:
    if isinstance(verdict, Verdict):
        return verdict.value
    return str(verdict or "")


def style_for(verdict: Any) -> VerdictStyle:
    """Style for a verdict; anything other than real or fake is uncertain"""
    return VERDICT_STYLES.get(_verdict_key(verdict), DEFAULT_STYLE)


def present(result: AnalysisResult) -> PresentationAttributes:
    key = _verdict_key(result.verdict)
    style = style_for(key)
    return PresentationAttributes(
        label=style.label,
        color_class=style.color_class,
        icon=style.icon,
        confidence_bar_width=result.confidence,
        # the bar is only green for authentic content
        bar_color_class="success" if key == Verdict.REAL.value else "destructive",
        confidence_text=f"Confidence: {result.confidence}%",
        explanation=result.explanation,
        red_flags=tuple(result.red_flags),
    )


def present_state(state: "RequestState") -> Optional[PresentationAttributes]:
    """Attributes for a succeeded state, None for idle, pending or failed"""
    if state.result is None:
        return None
    return present(state.result)
