from collections.abc import Iterable
from dataclasses import replace

from dossier.domain.enums import CaseSort, CaseStatus
from dossier.domain.errors import CaseNotFound, InvalidStatusTransition
from dossier.domain.models import CaseData, CaseRecord

_TRANSITIONS: dict[CaseStatus, frozenset[CaseStatus]] = {
    CaseStatus.pending: frozenset({CaseStatus.analyzing}),
    CaseStatus.analyzing: frozenset({CaseStatus.completed, CaseStatus.error}),
    CaseStatus.completed: frozenset(),
    CaseStatus.error: frozenset(),
}


class CaseSessionStore:
    """In-memory case records, newest batch first.

    Records are immutable; every mutation swaps in a new CaseRecord.
    """

    def __init__(self) -> None:
        self._records: dict[str, CaseRecord] = {}
        self._order: list[str] = []

    def __len__(self) -> int:
        return len(self._order)

    def __contains__(self, case_id: object) -> bool:
        return case_id in self._records

    def add(self, records: Iterable[CaseRecord]) -> None:
        batch = list(records)
        for r in batch:
            if r.id in self._records:
                raise ValueError(f"Duplicate case id: {r.id}")
        for r in batch:
            self._records[r.id] = r
        self._order = [r.id for r in batch] + self._order

    def get(self, case_id: str) -> CaseRecord:
        record = self._records.get(case_id)
        if record is None:
            raise CaseNotFound(case_id)
        return record

    def list_records(self, sort: CaseSort = CaseSort.date) -> list[CaseRecord]:
        records = [self._records[i] for i in self._order]
        if sort is CaseSort.name:
            return sorted(records, key=lambda r: r.file_name.casefold())
        if sort is CaseSort.pages:
            return sorted(records, key=lambda r: r.page_count or 0, reverse=True)
        return records

    def update_status(
        self,
        case_id: str,
        status: CaseStatus,
        analysis: CaseData | None = None,
        *,
        file_name: str | None = None,
        error_message: str | None = None,
    ) -> CaseRecord:
        current = self.get(case_id)
        if status not in _TRANSITIONS[current.status]:
            raise InvalidStatusTransition(case_id, current.status, status)

        updated = replace(current, status=status, error_message=error_message)
        if analysis is not None:
            updated = replace(updated, analysis=analysis)
        if file_name is not None:
            updated = replace(
                updated,
                file_name=file_name,
                file_data=replace(current.file_data, name=file_name),
            )
        self._records[case_id] = updated
        return updated

    def set_page_count(self, case_id: str, page_count: int) -> CaseRecord:
        current = self.get(case_id)
        if current.page_count == page_count:
            return current
        updated = replace(current, page_count=page_count)
        self._records[case_id] = updated
        return updated

    def remove(self, case_id: str) -> None:
        if case_id not in self._records:
            raise CaseNotFound(case_id)
        del self._records[case_id]
        self._order.remove(case_id)
