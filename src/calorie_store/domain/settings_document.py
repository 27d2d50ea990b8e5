"""Domain models for the settings and food library document."""

from pydantic import Field, field_validator

from calorie_store.domain.records import (
    DATE_PATTERN,
    FoodItem,
    MealEntry,
    RecordModel,
    check_calendar_date,
)


class Goals(RecordModel):
    """Daily nutrition and body targets."""

    daily_calories: float = Field(ge=500, le=10000)
    protein: float = Field(ge=0, le=500)
    carbs: float = Field(ge=0, le=1000)
    fats: float = Field(ge=0, le=500)
    water_glasses: float = Field(ge=0, le=50)
    target_weight: float | None = Field(default=None, ge=0, le=1000)


class SavedFood(FoodItem):
    """Reusable food template in the user's library."""

    id: str
    category: str | None = None
    use_count: int = Field(ge=0)
    last_used: str | None = None


class WeightEntry(RecordModel):
    date: str = Field(pattern=DATE_PATTERN)
    weight: float = Field(ge=0, le=1000)
    notes: str | None = None

    @field_validator("date")
    @classmethod
    def _check_date(cls, value: str) -> str:
        return check_calendar_date(value)


class SettingsDocument(RecordModel):
    """Singleton document replaced in full on every save."""

    goals: Goals
    saved_foods: list[SavedFood]
    recent_meals: list[MealEntry]
    weight_history: list[WeightEntry]


def default_settings_document() -> SettingsDocument:
    """Return the starter document used before the first save."""
    return SettingsDocument(
        goals=Goals(
            daily_calories=2000,
            protein=150,
            carbs=200,
            fats=65,
            target_weight=180,
            water_glasses=8,
        ),
        saved_foods=[],
        recent_meals=[],
        weight_history=[],
    )
