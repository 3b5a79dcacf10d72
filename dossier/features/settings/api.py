from dataclasses import asdict

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel

from dossier.features.settings.display import THEMES, make_display_config

router = APIRouter(prefix="/settings", tags=["settings"])


class DisplayUpdate(BaseModel):
    theme: str = "original"
    full_width: bool = False


@router.get("/display")
def get_display(request: Request) -> dict[str, object]:
    return {**asdict(request.app.state.display), "themes": {k: v["label"] for k, v in THEMES.items()}}


@router.put("/display")
def set_display(request: Request, body: DisplayUpdate) -> dict[str, object]:
    try:
        request.app.state.display = make_display_config(body.theme, body.full_width)
    except ValueError:
        raise HTTPException(status_code=400, detail="unknown_theme")
    return asdict(request.app.state.display)
