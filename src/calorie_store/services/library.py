"""Services for the saved-food library, recent meals and weight history.

Every helper loads the settings document, changes it in memory and saves the
whole document back.
"""

from dataclasses import dataclass
from datetime import UTC, datetime

from calorie_store.domain.records import MealEntry
from calorie_store.domain.sessions import SessionContext
from calorie_store.domain.settings_document import (
    SavedFood,
    SettingsDocument,
    WeightEntry,
)
from calorie_store.services.settings_document import SettingsDocumentService
from calorie_store.services.validation import validate_model


@dataclass
class LibraryService:
    """Application service for library operations."""

    settings_service: SettingsDocumentService
    recent_meals_limit: int = 10

    def add_saved_food(
        self, session: SessionContext | None, food: SavedFood | dict[str, object]
    ) -> SavedFood:
        """Add a food, replacing any saved food with the same id."""
        saved = validate_model(SavedFood, food)
        document = self.settings_service.load(session)
        foods = [item for item in document.saved_foods if item.id != saved.id]
        foods.append(saved)
        self._save(session, document, saved_foods=foods)
        return saved

    def remove_saved_food(self, session: SessionContext | None, food_id: str) -> bool:
        """Remove a saved food; return False if it was not in the library."""
        document = self.settings_service.load(session)
        foods = [item for item in document.saved_foods if item.id != food_id]
        if len(foods) == len(document.saved_foods):
            return False
        self._save(session, document, saved_foods=foods)
        return True

    def record_food_use(
        self, session: SessionContext | None, food_id: str
    ) -> SavedFood | None:
        """Increment a saved food's use count and stamp its last use."""
        document = self.settings_service.load(session)
        updated: SavedFood | None = None
        foods: list[SavedFood] = []
        for item in document.saved_foods:
            if item.id == food_id:
                item = item.model_copy(
                    update={
                        "use_count": item.use_count + 1,
                        "last_used": datetime.now(tz=UTC).isoformat(),
                    }
                )
                updated = item
            foods.append(item)
        if updated is None:
            return None
        self._save(session, document, saved_foods=foods)
        return updated

    def top_foods(self, session: SessionContext | None, limit: int = 20) -> list[SavedFood]:
        """Return the most used foods, ties broken by name."""
        document = self.settings_service.load(session)
        ranked = sorted(
            document.saved_foods,
            key=lambda item: (-item.use_count, item.name.lower()),
        )
        return ranked[:limit]

    def remember_meal(
        self, session: SessionContext | None, meal: MealEntry | dict[str, object]
    ) -> list[MealEntry]:
        """Put a meal at the front of the recent list, keeping it bounded."""
        entry = validate_model(MealEntry, meal)
        document = self.settings_service.load(session)
        recent = [entry] + [item for item in document.recent_meals if item.id != entry.id]
        recent = recent[: self.recent_meals_limit]
        self._save(session, document, recent_meals=recent)
        return recent

    def add_weight_entry(
        self, session: SessionContext | None, entry: WeightEntry | dict[str, object]
    ) -> list[WeightEntry]:
        """Record a weigh-in, replacing any entry for the same date."""
        weight = validate_model(WeightEntry, entry)
        document = self.settings_service.load(session)
        history = [item for item in document.weight_history if item.date != weight.date]
        history.append(weight)
        history.sort(key=lambda item: item.date)
        self._save(session, document, weight_history=history)
        return history

    def remove_weight_entry(self, session: SessionContext | None, date: str) -> bool:
        """Remove the weigh-in for a date; return False if none existed."""
        document = self.settings_service.load(session)
        history = [item for item in document.weight_history if item.date != date]
        if len(history) == len(document.weight_history):
            return False
        self._save(session, document, weight_history=history)
        return True

    def weight_history(self, session: SessionContext | None) -> list[WeightEntry]:
        """Return weigh-ins oldest first."""
        document = self.settings_service.load(session)
        return sorted(document.weight_history, key=lambda item: item.date)

    def _save(
        self,
        session: SessionContext | None,
        document: SettingsDocument,
        **changes: object,
    ) -> None:
        self.settings_service.save(document.model_copy(update=changes), session)
