"""
Candidate text holder for the analysis demo
"""
from typing import Callable, List, Optional

SAMPLE_TEXTS: List[str] = [
    "Scientists discover new planet made entirely of diamonds orbiting nearby star",
    "Local community raises funds for new children's hospital wing",
    "BREAKING: Government announces mandatory microchip implants for all citizens by 2025",
]

SAMPLE_PREVIEW_LENGTH = 40

PendingProbe = Callable[[], bool]


class InputStore:
    """Holds the current candidate text and whether it may be submitted"""

    def __init__(self, text: str = "", pending_probe: Optional[PendingProbe] = None):
        self._text = text or ""
        self._pending_probe = pending_probe

    @property
    def text(self) -> str:
        return self._text

    @property
    def trimmed(self) -> str:
        return self._text.strip()

    def set_text(self, text: Optional[str]) -> None:
        self._text = text or ""

    def bind_pending_probe(self, probe: Optional[PendingProbe]) -> None:
        """Attach the owner's 'is a request pending' check"""
        self._pending_probe = probe

    def can_submit(self) -> bool:
        if not self.trimmed:
            return False
        return not (self._pending_probe is not None and self._pending_probe())

    def use_sample(self, index: int) -> str:
        """Replace the text with one of the bundled samples"""
        if not 0 <= index < len(SAMPLE_TEXTS):
            raise IndexError(f"No sample text at index {index}")
        self.set_text(SAMPLE_TEXTS[index])
        return self._text


def sample_previews() -> List[str]:
    return [text[:SAMPLE_PREVIEW_LENGTH] + "..." for text in SAMPLE_TEXTS]
