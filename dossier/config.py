import logging
import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

CASE_MIME_TYPES = frozenset(
    {"application/pdf", "text/plain", "image/jpeg", "image/png", "image/webp"}
)
REFERENCE_MIME_TYPES = frozenset({"application/pdf", "text/plain"})
MAX_UPLOAD_BYTES = 20 * 1024 * 1024


@dataclass(frozen=True)
class AppConfig:
    gemini_api_key: str = ""
    analysis_model: str = "gemini-3-pro-preview"
    search_model: str = "gemini-3-flash-preview"
    thinking_budget: int = 32768
    max_upload_bytes: int = MAX_UPLOAD_BYTES
    log_level: str = "INFO"
    case_mime_types: frozenset[str] = field(default=CASE_MIME_TYPES)
    reference_mime_types: frozenset[str] = field(default=REFERENCE_MIME_TYPES)


def load_config() -> AppConfig:
    load_dotenv()
    return AppConfig(
        gemini_api_key=os.getenv("DOSSIER_GEMINI_API_KEY", os.getenv("GEMINI_API_KEY", "")),
        analysis_model=os.getenv("DOSSIER_ANALYSIS_MODEL", "gemini-3-pro-preview"),
        search_model=os.getenv("DOSSIER_SEARCH_MODEL", "gemini-3-flash-preview"),
        thinking_budget=int(os.getenv("DOSSIER_THINKING_BUDGET", "32768")),
        max_upload_bytes=int(os.getenv("DOSSIER_MAX_UPLOAD_BYTES", str(MAX_UPLOAD_BYTES))),
        log_level=os.getenv("DOSSIER_LOG_LEVEL", "INFO").upper(),
    )


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
