import math
import re
from collections.abc import Iterable
from dataclasses import dataclass

from dossier.domain.models import HighlightRect
from dossier.features.viewer.viewport import Matrix, Viewport

_WS_RE = re.compile(r"\s+")
_MIN_WORD_LENGTH = 3
# Average glyph width relative to font size, used when a run reports no width.
_GLYPH_WIDTH_RATIO = 0.5


@dataclass(frozen=True)
class TextRun:
    """One positioned piece of page text.

    `transform` is (a, b, c, d, x, y) in PDF user space; (x, y) is the
    run's baseline origin and hypot(c, d) its font size.
    """

    text: str
    transform: Matrix
    width: float = 0.0


def normalize_quote(quote: str | None) -> str:
    return _WS_RE.sub(" ", (quote or "").lower()).strip()


def run_matches(run_text: str, quote: str) -> bool:
    """Loose per-run match: the whole quote, or any of its longer words.

    `quote` must already be normalized.
    """
    text = run_text.lower()
    if quote in text:
        return True
    return any(len(w) > _MIN_WORD_LENGTH and w in text for w in quote.split(" "))


def run_rect(run: TextRun) -> tuple[float, float, float, float]:
    a, b, c, d, x, y = run.transform
    font_size = math.hypot(c, d)
    width = run.width or len(run.text) * font_size * _GLYPH_WIDTH_RATIO
    return (x, y, x + width, y + font_size)


def to_screen_rect(rect: tuple[float, float, float, float], viewport: Viewport) -> HighlightRect:
    x0, y0, x1, y1 = viewport.convert_to_viewport_rectangle(rect)
    left, right = min(x0, x1), max(x0, x1)
    top, bottom = min(y0, y1), max(y0, y1)
    return HighlightRect(x=left, y=top, width=right - left, height=bottom - top)


def resolve_highlights(runs: Iterable[TextRun], quote: str | None, viewport: Viewport) -> list[HighlightRect]:
    """Rectangles, in viewport pixels, for every run that plausibly holds `quote`.

    Best effort: short quotes made of common words over-match, and quotes
    split across runs in odd places can be missed.
    """
    needle = normalize_quote(quote)
    if not needle:
        return []
    return [to_screen_rect(run_rect(r), viewport) for r in runs if r.text and run_matches(r.text, needle)]
