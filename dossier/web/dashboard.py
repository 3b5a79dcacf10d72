from pathlib import Path

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from dossier.domain.enums import CaseSort
from dossier.domain.errors import CaseNotFound
from dossier.features.table.rows import HEADERS, consolidate_cases

router = APIRouter(tags=["dashboard"])

templates = Jinja2Templates(directory=str(Path(__file__).resolve().parents[1] / "templates"))


@router.get("/", response_class=HTMLResponse)
def dashboard_home(request: Request, sort: CaseSort = CaseSort.date) -> HTMLResponse:
    return templates.TemplateResponse(
        request,
        "cases.html",
        {
            "title": "Asistente Jurídico",
            "display": request.app.state.display,
            "cases": request.app.state.store.list_records(sort),
            "sort": sort.value,
        },
    )


@router.get("/dashboard/table", response_class=HTMLResponse)
def dashboard_table(request: Request) -> HTMLResponse:
    rows = consolidate_cases(request.app.state.store.list_records())
    return templates.TemplateResponse(
        request,
        "table.html",
        {
            "title": "Matriz Consolidada de Casos",
            "display": request.app.state.display,
            "headers": HEADERS,
            "rows": rows,
        },
    )


@router.get("/dashboard/cases/{case_id}", response_class=HTMLResponse)
def dashboard_case(request: Request, case_id: str) -> HTMLResponse:
    try:
        record = request.app.state.store.get(case_id)
    except CaseNotFound:
        raise HTTPException(status_code=404, detail="case_not_found")
    return templates.TemplateResponse(
        request,
        "case.html",
        {
            "title": record.file_name,
            "display": request.app.state.display,
            "case": record,
            "data": record.analysis,
        },
    )
