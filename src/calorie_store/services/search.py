"""Full-corpus search over daily records."""

from dataclasses import dataclass

from calorie_store.domain.records import DailyRecord, StoredRecord
from calorie_store.domain.sessions import SessionContext
from calorie_store.services.records import RecordStore


@dataclass
class SearchService:
    """Filters every stored record by text and tags."""

    record_store: RecordStore

    def search(
        self,
        session: SessionContext | None,
        query: str | None = None,
        tags: list[str] | None = None,
    ) -> list[StoredRecord]:
        """Return records matching both the text and tag predicates.

        A blank query or empty tag list applies no predicate. Results keep
        the store's most-recent-first order.
        """
        needle = (query or "").strip().lower()
        wanted = set(tags or [])
        results: list[StoredRecord] = []
        for record in self.record_store.list_records(session):
            if not needle and not wanted:
                results.append(record)
                continue
            if not isinstance(record, DailyRecord):
                continue
            if needle and not _matches_text(record, needle):
                continue
            if wanted and wanted.isdisjoint(record.tags):
                continue
            results.append(record)
        return results


def _matches_text(record: DailyRecord, needle: str) -> bool:
    if record.notes and needle in record.notes.lower():
        return True
    return any(
        needle in food.name.lower() for meal in record.meals for food in meal.foods
    )
