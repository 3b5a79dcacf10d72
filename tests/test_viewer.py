import asyncio

import fitz
import pytest

from dossier.domain.errors import NotRenderable, RenderCancelled, RenderError
from dossier.domain.models import FileData
from dossier.features.cases.service import new_case_record
from dossier.features.cases.store import CaseSessionStore
from dossier.features.viewer.highlight import resolve_highlights
from dossier.features.viewer.service import ViewerRegistry, ViewerSurface
from dossier.infra.pdf_render import CancellationToken, extract_text_runs, open_pdf, render_page

from conftest import make_pdf


def test_text_runs_are_in_pdf_space(sample_pdf: bytes) -> None:
    doc = open_pdf(sample_pdf)
    runs, width, height = extract_text_runs(doc.load_page(0))
    doc.close()

    assert (width, height) == (612, 792)
    assert len(runs) == 1
    run = runs[0]
    assert run.text == "the quick brown fox jumps"
    # Baseline was placed 100pt from the top.
    assert run.transform[4] == pytest.approx(72, abs=0.5)
    assert run.transform[5] == pytest.approx(692, abs=0.5)
    assert run.width > 0


def test_render_page_produces_png(sample_pdf: bytes) -> None:
    doc = open_pdf(sample_pdf)
    rendered = render_page(doc, 2, 1.5, 90, CancellationToken())
    doc.close()

    assert rendered.png.startswith(b"\x89PNG")
    assert rendered.page_number == 2
    assert rendered.viewport.width == pytest.approx(792 * 1.5)
    assert rendered.viewport.height == pytest.approx(612 * 1.5)


def dark_pixels(pix: fitz.Pixmap, rect) -> int:
    x0, y0 = max(0, int(rect.x)), max(0, int(rect.y))
    x1, y1 = min(pix.width, int(rect.x + rect.width) + 1), min(pix.height, int(rect.y + rect.height) + 1)
    return sum(1 for x in range(x0, x1) for y in range(y0, y1) if sum(pix.pixel(x, y)[:3]) < 300)


@pytest.mark.parametrize("page_rotation", [0, 90, 270])
@pytest.mark.parametrize("rotation", [0, 90, 180, 270])
def test_highlights_land_on_the_rendered_text(page_rotation: int, rotation: int) -> None:
    doc = open_pdf(make_pdf(["the quick brown fox jumps"], rotation=page_rotation))
    rendered = render_page(doc, 1, 1.5, rotation, CancellationToken())
    doc.close()

    pix = fitz.Pixmap(rendered.png)
    assert rendered.viewport.rotation == (page_rotation + rotation) % 360
    assert (pix.width, pix.height) == (round(rendered.viewport.width), round(rendered.viewport.height))

    (rect,) = resolve_highlights(rendered.runs, "quick brown", rendered.viewport)
    assert dark_pixels(pix, rect) > 50


def test_cancelled_token_stops_render(sample_pdf: bytes) -> None:
    doc = open_pdf(sample_pdf)
    token = CancellationToken()
    token.cancel()

    with pytest.raises(RenderCancelled):
        render_page(doc, 1, 1.0, 0, token)
    doc.close()


def test_broken_pdf_is_a_render_error() -> None:
    with pytest.raises(RenderError):
        open_pdf(b"definitely not a pdf")


def test_quote_highlights_on_rendered_page(sample_pdf: bytes) -> None:
    async def scenario() -> None:
        surface = ViewerSurface(sample_pdf)
        await surface.show(1)

        rects = surface.highlights("quick brown")
        assert len(rects) == 1
        r = rects[0]
        assert r.x == pytest.approx(72, abs=0.5)
        assert r.y == pytest.approx(88, abs=1.0)
        assert r.height == pytest.approx(12, abs=0.5)

        assert surface.highlights("") == []
        assert surface.highlights("expediente") == []

        await surface.show(2)
        assert len(surface.highlights("expediente")) == 1
        surface.close()

    asyncio.run(scenario())


def test_show_clamps_page_and_scale(sample_pdf: bytes) -> None:
    async def scenario() -> None:
        surface = ViewerSurface(sample_pdf)

        rendered = await surface.show(99, scale=10)
        assert rendered.page_number == 2
        assert rendered.viewport.scale == 3.0

        rendered = await surface.show(-4, scale=0.01)
        assert rendered.page_number == 1
        assert rendered.viewport.scale == 0.5

        with pytest.raises(ValueError):
            await surface.show(1, rotation=45)
        surface.close()

    asyncio.run(scenario())


def test_same_view_is_served_from_cache(sample_pdf: bytes) -> None:
    async def scenario() -> None:
        surface = ViewerSurface(sample_pdf)
        first = await surface.show(1, 1.0, 0)
        again = await surface.show(1, 1.0, 360)
        assert again is first
        surface.close()

    asyncio.run(scenario())


def test_newer_render_supersedes_older_one(sample_pdf: bytes) -> None:
    async def scenario() -> None:
        surface = ViewerSurface(sample_pdf)

        old, new = await asyncio.gather(surface.show(1), surface.show(2), return_exceptions=True)

        assert isinstance(old, RenderCancelled)
        assert new.page_number == 2
        assert surface.current is new
        surface.close()

    asyncio.run(scenario())


def test_registry_only_opens_pdfs(sample_pdf: bytes) -> None:
    store = CaseSessionStore()
    pdf = new_case_record(FileData(name="a.pdf", mime_type="application/pdf", data=sample_pdf))
    text = new_case_record(FileData(name="a.txt", mime_type="text/plain", data=b"hola"))
    store.add([pdf, text])
    registry = ViewerRegistry(store)

    surface = registry.surface(pdf.id)

    assert registry.surface(pdf.id) is surface
    assert registry.surface(pdf.id, "popup") is not surface
    assert store.get(pdf.id).page_count == 2
    with pytest.raises(NotRenderable):
        registry.surface(text.id)

    registry.discard(pdf.id)
    assert registry.surface(pdf.id) is not surface
    registry.close_all()


def test_registry_keeps_few_surfaces_per_case(sample_pdf: bytes) -> None:
    store = CaseSessionStore()
    a = new_case_record(FileData(name="a.pdf", mime_type="application/pdf", data=sample_pdf))
    b = new_case_record(FileData(name="b.pdf", mime_type="application/pdf", data=sample_pdf))
    store.add([a, b])
    registry = ViewerRegistry(store, max_surfaces_per_case=2)

    other = registry.surface(b.id)
    first = registry.surface(a.id, "s0")
    registry.surface(a.id, "s1")
    assert registry.surface(a.id, "s0") is first
    registry.surface(a.id, "s2")

    # s1 was the least recently used surface of case a.
    assert len(registry) == 3
    assert registry.surface(a.id, "s0") is first
    assert registry.surface(b.id) is other

    async def scenario() -> None:
        stale = registry.surface(a.id, "s2")
        registry.surface(a.id, "s3")
        registry.surface(a.id, "s4")
        with pytest.raises(RenderCancelled):
            await stale.show(1)
        assert stale.page_count == 2

    asyncio.run(scenario())
    registry.close_all()
    assert len(registry) == 0
