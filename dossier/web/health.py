from fastapi import APIRouter, Request

router = APIRouter(tags=["health"])


@router.get("/health")
def health(request: Request) -> dict[str, object]:
    return {
        "status": "ok",
        "cases": len(request.app.state.store),
        "in_flight": request.app.state.cases.in_flight,
    }
