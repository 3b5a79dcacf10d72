from dataclasses import asdict

from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse

from dossier.features.table.rows import HEADERS, consolidate_cases, rows_to_tsv

router = APIRouter(tags=["table"])


@router.get("/table")
def consolidated_table(request: Request) -> dict[str, object]:
    rows = consolidate_cases(request.app.state.store.list_records())
    return {"headers": list(HEADERS), "rows": [asdict(r) for r in rows]}


@router.get("/table.tsv", response_class=PlainTextResponse)
def consolidated_table_tsv(request: Request) -> str:
    return rows_to_tsv(consolidate_cases(request.app.state.store.list_records()))
