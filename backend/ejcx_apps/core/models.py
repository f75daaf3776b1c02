"""Core Data Models - Pydantic models for type safety.

All models are value objects with no behavior beyond validation.
"""

from datetime import datetime, timedelta
from typing import Literal, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


Severity = Literal["default", "destructive"]


def _coerce_number(value: object) -> Optional[float]:
    """Turn a stored or typed value into a number, or None when unset.

    Records written by the browser version hold numbers as strings and
    unset values as empty strings. Anything that is not a number is unset.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return float(text)
        except ValueError:
            return None
    return None


class EntryDraft(BaseModel):
    """The food entry form before it is added to a day."""

    food: str = ""
    calories: Optional[float] = None
    fat: Optional[float] = None
    carbs: Optional[float] = None
    protein: Optional[float] = None

    @field_validator("calories", "fat", "carbs", "protein", mode="before")
    @classmethod
    def coerce_numbers(cls, value: object) -> Optional[float]:
        return _coerce_number(value)


class FoodEntry(BaseModel):
    """A single food item logged for a day."""

    model_config = ConfigDict(frozen=True)

    id: int = Field(description="Creation timestamp in milliseconds")
    food: str = Field(min_length=1, description="Name of the food")
    calories: Optional[float] = Field(default=None, description="Total calories")
    fat: Optional[float] = Field(default=None, description="Fat in grams")
    carbs: Optional[float] = Field(default=None, description="Carbohydrates in grams")
    protein: Optional[float] = Field(default=None, description="Protein in grams")

    @field_validator("calories", "fat", "carbs", "protein", mode="before")
    @classmethod
    def coerce_numbers(cls, value: object) -> Optional[float]:
        return _coerce_number(value)


class DailyTotals(BaseModel):
    """Summed macros for one day."""

    calories: float = 0
    fat: float = 0
    carbs: float = 0
    protein: float = 0


class ExportRow(BaseModel):
    """One CSV row: an entry tagged with its day."""

    date: str
    food: str
    calories: Optional[float] = None
    fat: Optional[float] = None
    carbs: Optional[float] = None
    protein: Optional[float] = None


class Quadrant(BaseModel):
    """A fixed region of the plot."""

    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    color: str
    x_range: tuple[float, float]
    y_range: tuple[float, float]


class Point(BaseModel):
    """A plotted point in logical coordinates."""

    model_config = ConfigDict(frozen=True)

    id: int
    x: float = Field(ge=-5, le=5)
    y: float = Field(ge=-5, le=5)
    description: str = ""


class AveragePoint(BaseModel):
    """Mean position of all points."""

    x: float
    y: float


class PlotState(BaseModel):
    """Everything the plotter knows during a session."""

    model_config = ConfigDict(frozen=True)

    points: tuple[Point, ...] = ()
    selected_id: Optional[int] = None
    is_editing: bool = False
    current_description: str = ""


class Notification(BaseModel):
    """A transient banner shown after a user action."""

    message: str
    severity: Severity = "default"
    shown_at: datetime
    duration: timedelta = Field(default=timedelta(seconds=3))
