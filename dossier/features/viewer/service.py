import asyncio
import logging
import threading
from collections import OrderedDict

from dossier.domain.errors import NotRenderable, RenderCancelled, RenderError
from dossier.domain.models import HighlightRect
from dossier.features.cases.store import CaseSessionStore
from dossier.features.viewer.highlight import resolve_highlights
from dossier.features.viewer.viewport import clamp_scale, normalize_rotation
from dossier.infra.pdf_render import CancellationToken, RenderedPage, open_pdf, render_page

logger = logging.getLogger(__name__)

PDF_MIME_TYPE = "application/pdf"
MAX_SURFACES_PER_CASE = 4


class ViewerSurface:
    """One place a case's PDF is shown.

    Starting a render cancels the one still in flight here. The last
    rendered page is kept so a new quote only re-runs the matching.
    """

    def __init__(self, pdf_bytes: bytes) -> None:
        self._doc = open_pdf(pdf_bytes)
        self._page_count = self._doc.page_count
        self._closed = False
        self._doc_lock = threading.Lock()
        self._token: CancellationToken | None = None
        self._current: RenderedPage | None = None
        self.error: str | None = None

    @property
    def page_count(self) -> int:
        return self._page_count

    @property
    def current(self) -> RenderedPage | None:
        return self._current

    def _render_locked(self, page: int, scale: float, rotation: int, token: CancellationToken) -> RenderedPage:
        with self._doc_lock:
            return render_page(self._doc, page, scale, rotation, token)

    async def show(self, page: int, scale: float = 1.0, rotation: int = 0) -> RenderedPage:
        if self._closed:
            raise RenderCancelled()
        page = max(1, min(page, self.page_count))
        scale = clamp_scale(scale)
        rotation = normalize_rotation(rotation)

        cur = self._current
        if cur is not None and (cur.page_number, cur.viewport.scale, cur.rotation) == (page, scale, rotation):
            return cur

        if self._token is not None:
            self._token.cancel()
        token = CancellationToken()
        self._token = token

        try:
            rendered = await asyncio.to_thread(self._render_locked, page, scale, rotation, token)
        except RenderCancelled:
            logger.debug("render of page %d cancelled", page)
            raise
        except RenderError as e:
            logger.warning("render of page %d failed: %s", page, e)
            self.error = str(e)
            raise

        # A newer render may have started while this one was running.
        token.raise_if_cancelled()
        self._current = rendered
        self.error = None
        return rendered

    def highlights(self, quote: str | None) -> list[HighlightRect]:
        if self._current is None:
            return []
        return resolve_highlights(self._current.runs, quote, self._current.viewport)

    def close(self) -> None:
        self._closed = True
        if self._token is not None:
            self._token.cancel()
        # Waits for a render still using the document in its worker thread.
        with self._doc_lock:
            self._doc.close()


class ViewerRegistry:
    """Open viewing surfaces, keyed by (case id, surface id).

    Surface ids come from clients, so each case keeps at most
    `max_surfaces_per_case` open; the least recently used one is closed.
    """

    def __init__(self, store: CaseSessionStore, *, max_surfaces_per_case: int = MAX_SURFACES_PER_CASE) -> None:
        self._store = store
        self._max_per_case = max_surfaces_per_case
        self._surfaces: OrderedDict[tuple[str, str], ViewerSurface] = OrderedDict()

    def __len__(self) -> int:
        return len(self._surfaces)

    def surface(self, case_id: str, surface_id: str = "main") -> ViewerSurface:
        key = (case_id, surface_id)
        existing = self._surfaces.get(key)
        if existing is not None:
            self._surfaces.move_to_end(key)
            return existing

        record = self._store.get(case_id)
        if record.file_data.mime_type != PDF_MIME_TYPE:
            raise NotRenderable(record.file_data.mime_type)

        surface = ViewerSurface(record.file_data.data)
        self._store.set_page_count(case_id, surface.page_count)
        self._surfaces[key] = surface
        self._evict(case_id)
        return surface

    def _evict(self, case_id: str) -> None:
        keys = [k for k in self._surfaces if k[0] == case_id]
        for key in keys[: max(0, len(keys) - self._max_per_case)]:
            logger.debug("closing least recently used surface %s of case %s", key[1], case_id)
            self._surfaces.pop(key).close()

    def discard(self, case_id: str) -> None:
        for key in [k for k in self._surfaces if k[0] == case_id]:
            self._surfaces.pop(key).close()

    def close_all(self) -> None:
        for surface in self._surfaces.values():
            surface.close()
        self._surfaces.clear()
