import threading
from dataclasses import dataclass

import fitz  # PyMuPDF

from dossier.domain.errors import RenderCancelled, RenderError
from dossier.features.viewer.highlight import TextRun
from dossier.features.viewer.viewport import Viewport


class CancellationToken:
    """Handed to one render; the owner of the viewing surface cancels it."""

    def __init__(self) -> None:
        self._cancelled = threading.Event()

    def cancel(self) -> None:
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def raise_if_cancelled(self) -> None:
        if self._cancelled.is_set():
            raise RenderCancelled()


@dataclass(frozen=True)
class RenderedPage:
    """`rotation` is what the caller asked for; `viewport.rotation` also includes the page's own /Rotate."""

    page_number: int
    rotation: int
    png: bytes
    viewport: Viewport
    runs: tuple[TextRun, ...]


def open_pdf(data: bytes) -> fitz.Document:
    try:
        return fitz.open(stream=data, filetype="pdf")
    except (RuntimeError, ValueError) as e:
        raise RenderError(f"No se pudo procesar el archivo PDF: {e}") from e


def extract_text_runs(page: fitz.Page) -> tuple[list[TextRun], float, float]:
    """Text spans of a page as PDF-space runs, plus the unrotated page width and height.

    PyMuPDF extracts text with the page's /Rotate removed, so runs and sizes
    are in unrotated page space.
    """
    content = page.get_text("dict")
    width = float(content["width"])
    height = float(content["height"])

    runs: list[TextRun] = []
    for block in content["blocks"]:
        for line in block.get("lines", []):
            for span in line["spans"]:
                text = span["text"]
                if not text.strip():
                    continue
                size = float(span["size"])
                ox, oy = span["origin"]
                x0, _, x1, _ = span["bbox"]
                # PyMuPDF measures y down from the top; PDF space measures it up from the bottom.
                runs.append(TextRun(text=text, transform=(size, 0.0, 0.0, size, ox, height - oy), width=x1 - x0))
    return runs, width, height


def render_page(
    doc: fitz.Document,
    page_number: int,
    scale: float,
    rotation: int,
    token: CancellationToken,
) -> RenderedPage:
    token.raise_if_cancelled()
    try:
        page = doc.load_page(page_number - 1)
        runs, width, height = extract_text_runs(page)
        token.raise_if_cancelled()
        # The pixmap already carries the page's /Rotate; the matrix adds the user rotation on top.
        pix = page.get_pixmap(matrix=fitz.Matrix(scale, scale).prerotate(rotation))
        page_rotation = page.rotation
        png = pix.tobytes("png")
    except (RuntimeError, ValueError, IndexError) as e:
        raise RenderError(f"Error rendering page {page_number}: {e}") from e

    # Last check before the caller commits the pixels.
    token.raise_if_cancelled()
    return RenderedPage(
        page_number=page_number,
        rotation=rotation,
        png=png,
        viewport=Viewport(
            view_box=(0.0, 0.0, width, height), scale=scale, rotation=(page_rotation + rotation) % 360
        ),
        runs=tuple(runs),
    )
