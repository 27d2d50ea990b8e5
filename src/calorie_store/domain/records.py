"""Domain models for daily records."""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date as date_type
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"
TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


class RecordModel(BaseModel):
    """Base model mapping snake_case attributes onto camelCase JSON keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        allow_inf_nan=False,
        extra="ignore",
    )

    def to_json_dict(self) -> dict[str, object]:
        """Return the JSON-ready mapping written to disk."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


def check_calendar_date(value: str) -> str:
    """Reject strings that match YYYY-MM-DD but name no real day."""
    try:
        date_type.fromisoformat(value)
    except ValueError as exc:
        raise ValueError("Date must be a real calendar day") from exc
    return value


class MealType(str, Enum):
    breakfast = "breakfast"
    lunch = "lunch"
    dinner = "dinner"
    snack = "snack"


class ExerciseType(str, Enum):
    two_g = "2G"
    three_g = "3G"
    tread_50 = "Tread 50"
    weight_50 = "Weight 50"
    other = "Other"


class FoodItem(RecordModel):
    """A food with its macros, copied by value into meals."""

    name: str = Field(min_length=1)
    calories: float = Field(ge=0)
    protein: float = Field(ge=0)
    carbs: float = Field(ge=0)
    fats: float = Field(ge=0)
    serving_size: str | None = None


class MealEntry(RecordModel):
    """A meal owned by a single daily record."""

    id: str
    meal_type: MealType
    time: str = Field(pattern=TIME_PATTERN)
    foods: list[FoodItem]
    notes: str | None = None


class ExerciseEntry(RecordModel):
    """The single exercise slot of a daily record."""

    id: str
    type: ExerciseType
    calories_burned: float = Field(ge=0)
    duration: float | None = Field(default=None, ge=0)
    notes: str | None = None


class WaterIntake(RecordModel):
    glasses: float = Field(ge=0, le=50)
    ounces: float = Field(ge=0, le=400)


class DailyRecord(RecordModel):
    """Everything logged for one calendar date."""

    date: str = Field(pattern=DATE_PATTERN)
    meals: list[MealEntry]
    exercise: ExerciseEntry | None = None
    water: WaterIntake
    weight: float | None = Field(default=None, ge=0, le=1000)
    notes: str | None = None
    tags: list[str]

    @field_validator("date")
    @classmethod
    def _check_date(cls, value: str) -> str:
        return check_calendar_date(value)

    @field_validator("tags")
    @classmethod
    def _dedupe_tags(cls, value: list[str]) -> list[str]:
        return list(dict.fromkeys(value))

    def totals(self) -> "NutritionTotals":
        """Sum macros across every food of every meal."""
        return NutritionTotals.of_foods(
            food for meal in self.meals for food in meal.foods
        )


@dataclass(frozen=True)
class NutritionTotals:
    """Summed macros for a set of foods."""

    calories: float = 0.0
    protein: float = 0.0
    carbs: float = 0.0
    fats: float = 0.0

    @classmethod
    def of_foods(cls, foods: Iterable[FoodItem]) -> "NutritionTotals":
        total = cls()
        for food in foods:
            total = cls(
                calories=total.calories + food.calories,
                protein=total.protein + food.protein,
                carbs=total.carbs + food.carbs,
                fats=total.fats + food.fats,
            )
        return total


@dataclass(frozen=True)
class UnreadableRecord:
    """A stored record that could not be decrypted or parsed."""

    date: str
    reason: str


StoredRecord = DailyRecord | UnreadableRecord


def as_number(value: float) -> int | float:
    """Return ints for integral floats so output reads 650 rather than 650.0."""
    if float(value).is_integer():
        return int(value)
    return value
