from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from dossier.config import AppConfig, configure_logging, load_config
from dossier.features.cases.api import router as cases_router
from dossier.features.cases.service import CaseService
from dossier.features.cases.store import CaseSessionStore
from dossier.features.extraction.pipeline import Extractor
from dossier.features.references.api import router as references_router
from dossier.features.references.library import ReferenceLibrary
from dossier.features.search.api import router as search_router
from dossier.features.settings.api import router as settings_router
from dossier.features.settings.display import DisplayConfig
from dossier.features.table.api import router as table_router
from dossier.features.viewer.api import router as viewer_router
from dossier.features.viewer.service import ViewerRegistry
from dossier.infra.gemini import GeminiExtractor
from dossier.web.dashboard import router as dashboard_router
from dossier.web.health import router as health_router


def create_app(cfg: AppConfig | None = None, extractor: Extractor | None = None) -> FastAPI:
    cfg = cfg or load_config()
    configure_logging(cfg.log_level)

    if extractor is None:
        extractor = GeminiExtractor(
            api_key=cfg.gemini_api_key,
            analysis_model=cfg.analysis_model,
            search_model=cfg.search_model,
            thinking_budget=cfg.thinking_budget,
        )

    store = CaseSessionStore()
    references = ReferenceLibrary(allowed_mime_types=cfg.reference_mime_types, max_bytes=cfg.max_upload_bytes)
    cases = CaseService(store=store, references=references, extractor=extractor)
    viewers = ViewerRegistry(store)

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        yield
        await cases.shutdown()
        viewers.close_all()

    app = FastAPI(title="Dossier Dashboard", version="0.1.0", lifespan=lifespan)
    app.state.cfg = cfg
    app.state.extractor = extractor
    app.state.store = store
    app.state.references = references
    app.state.cases = cases
    app.state.viewers = viewers
    app.state.display = DisplayConfig()
    app.include_router(health_router)
    app.include_router(cases_router)
    app.include_router(viewer_router)
    app.include_router(table_router)
    app.include_router(references_router)
    app.include_router(search_router)
    app.include_router(settings_router)
    app.include_router(dashboard_router)
    return app


app = create_app()
