from dataclasses import asdict

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel, Field

from dossier.domain.errors import ExtractionError

router = APIRouter(prefix="/search", tags=["search"])


class SearchRequest(BaseModel):
    query: str = Field(max_length=2000)


@router.post("")
async def search_legal_context(request: Request, body: SearchRequest) -> dict[str, object]:
    query = body.query.strip()
    if not query:
        raise HTTPException(status_code=400, detail="empty_query")
    try:
        result = await request.app.state.extractor.search_legal_context(query)
    except ExtractionError as e:
        raise HTTPException(status_code=502, detail={"error": "search_failed", "message": e.message})
    return asdict(result)
