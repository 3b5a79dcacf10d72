from dataclasses import asdict

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import Response

from dossier.domain.errors import CaseNotFound, NotRenderable, RenderCancelled, RenderError
from dossier.features.viewer.service import ViewerSurface
from dossier.infra.pdf_render import RenderedPage

router = APIRouter(prefix="/cases", tags=["viewer"])


async def _show(
    request: Request, case_id: str, page: int, scale: float, rotation: int, surface: str
) -> tuple[ViewerSurface, RenderedPage]:
    try:
        view = request.app.state.viewers.surface(case_id, surface)
        rendered = await view.show(page, scale, rotation)
    except CaseNotFound:
        raise HTTPException(status_code=404, detail="case_not_found")
    except NotRenderable:
        raise HTTPException(status_code=415, detail="not_a_pdf")
    except ValueError:
        raise HTTPException(status_code=400, detail="invalid_rotation")
    except RenderCancelled:
        raise HTTPException(status_code=409, detail="render_superseded")
    except RenderError as e:
        raise HTTPException(status_code=422, detail={"error": "render_failed", "message": str(e)})
    return view, rendered


@router.get("/{case_id}/pages/{page}")
async def page_view(
    request: Request,
    case_id: str,
    page: int,
    scale: float = 1.0,
    rotation: int = 0,
    quote: str | None = None,
    surface: str = "main",
) -> dict[str, object]:
    view, rendered = await _show(request, case_id, page, scale, rotation, surface)
    return {
        "page": rendered.page_number,
        "page_count": view.page_count,
        "scale": rendered.viewport.scale,
        "rotation": rendered.rotation,
        "width": rendered.viewport.width,
        "height": rendered.viewport.height,
        "highlights": [asdict(h) for h in view.highlights(quote)],
    }


@router.get("/{case_id}/pages/{page}/image")
async def page_image(
    request: Request,
    case_id: str,
    page: int,
    scale: float = 1.0,
    rotation: int = 0,
    surface: str = "main",
) -> Response:
    _, rendered = await _show(request, case_id, page, scale, rotation, surface)
    return Response(content=rendered.png, media_type="image/png")
