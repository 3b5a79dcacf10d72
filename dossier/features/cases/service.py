import asyncio
import logging
import uuid
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, timezone

from dossier.domain.enums import CaseStatus
from dossier.domain.errors import CaseNotFound, ExtractionError
from dossier.domain.models import CaseData, CaseRecord, FileData
from dossier.features.extraction.pipeline import Extractor, analyze, renamed_file_name
from dossier.features.references.library import ReferenceLibrary
from dossier.features.cases.store import CaseSessionStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CaseCompletion:
    """Message a per-file task emits when it is done with its record."""

    case_id: str
    status: CaseStatus
    analysis: CaseData | None = None
    file_name: str | None = None
    error_message: str | None = None


def new_case_record(file: FileData) -> CaseRecord:
    return CaseRecord(
        id=str(uuid.uuid4()),
        file_name=file.name,
        upload_date=datetime.now(timezone.utc),
        analysis=CaseData(),
        file_data=file,
        status=CaseStatus.pending,
    )


class CaseService:
    def __init__(self, *, store: CaseSessionStore, references: ReferenceLibrary, extractor: Extractor) -> None:
        self._store = store
        self._references = references
        self._extractor = extractor
        self._tasks: set[asyncio.Task[CaseCompletion]] = set()

    @property
    def in_flight(self) -> int:
        return len(self._tasks)

    def submit(self, files: Sequence[FileData]) -> list[CaseRecord]:
        """Register one record per file and start one extraction task each.

        Must be called from a running event loop. Returns the records as they
        are right after scheduling, i.e. in the `analyzing` state.
        """
        records = [new_case_record(f) for f in files]
        self._store.add(records)
        references = self._references.list_files()

        for record in records:
            self._store.update_status(record.id, CaseStatus.analyzing)
            task = asyncio.create_task(
                self._extract(record.id, record.file_data, references),
                name=f"extract:{record.id}",
            )
            self._tasks.add(task)
            task.add_done_callback(self._on_task_done)

        logger.info("accepted %d file(s) for analysis", len(records))
        return [self._store.get(r.id) for r in records]

    async def _extract(self, case_id: str, file: FileData, references: Sequence[FileData]) -> CaseCompletion:
        logger.info("extraction started case=%s file=%s", case_id, file.name)
        try:
            outcome = await analyze(self._extractor, file, references)
        except ExtractionError as e:
            logger.warning("extraction failed case=%s code=%s: %s", case_id, e.code, e.message)
            return CaseCompletion(case_id=case_id, status=CaseStatus.error, error_message=e.message)

        logger.info("extraction finished case=%s rit=%s", case_id, outcome.rit)
        return CaseCompletion(
            case_id=case_id,
            status=CaseStatus.completed,
            analysis=outcome.data,
            file_name=renamed_file_name(file.name, outcome.rit),
        )

    def _on_task_done(self, task: "asyncio.Task[CaseCompletion]") -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return

        exc = task.exception()
        if exc is not None:
            case_id = task.get_name().removeprefix("extract:")
            logger.error("extraction crashed case=%s", case_id, exc_info=exc)
            completion = CaseCompletion(case_id=case_id, status=CaseStatus.error, error_message=str(exc))
        else:
            completion = task.result()
        self.apply(completion)

    def apply(self, completion: CaseCompletion) -> None:
        try:
            self._store.update_status(
                completion.case_id,
                completion.status,
                completion.analysis,
                file_name=completion.file_name,
                error_message=completion.error_message,
            )
        except CaseNotFound:
            logger.info("case %s was removed before its analysis finished", completion.case_id)

    async def drain(self) -> None:
        """Wait until every in-flight extraction has been applied to the store."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
            await asyncio.sleep(0)

    async def shutdown(self) -> None:
        for task in list(self._tasks):
            task.cancel()
        await asyncio.gather(*list(self._tasks), return_exceptions=True)
