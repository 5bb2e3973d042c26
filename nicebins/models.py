"""
Pydantic models for binning options and histogram output
"""
from enum import Enum
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import InvalidOptionsError


class DataType(str, Enum):
    NUMBER = "number"
    INTEGER = "integer"
    DATE = "date"
    STRING = "string"
    BOOLEAN = "boolean"


QUANTITATIVE_TYPES = (DataType.NUMBER, DataType.INTEGER, DataType.DATE)


# ---------------------------------------------------
# Option Models
# ---------------------------------------------------
class BinOptions(BaseModel):
    """Constraints for the numeric step chooser"""
    model_config = ConfigDict(extra="forbid")

    maxbins: Optional[int] = Field(None, gt=0)
    step: Optional[float] = Field(None, gt=0)
    steps: Optional[List[float]] = None
    minstep: Optional[float] = Field(None, ge=0)
    div: Optional[List[float]] = None
    base: Optional[float] = Field(None, gt=1)

    @field_validator("steps")
    @classmethod
    def _positive_steps(cls, v):
        if v is not None:
            if len(v) == 0:
                raise ValueError("steps must not be empty")
            if any(s <= 0 for s in v):
                raise ValueError("steps must all be positive")
        return v

    @field_validator("div")
    @classmethod
    def _divisors_above_one(cls, v):
        if v is not None and any(d <= 1 for d in v):
            raise ValueError("div entries must be greater than 1")
        return v


class DateBinOptions(BaseModel):
    """Constraints for the calendar step chooser"""
    model_config = ConfigDict(extra="forbid")

    unit: Optional[str] = None
    maxbins: Optional[int] = Field(None, gt=0)
    minbins: Optional[int] = Field(None, gt=0)


class HistogramOptions(BaseModel):
    """Options accepted by histogram() and bin_accessor()"""
    model_config = ConfigDict(extra="forbid")

    type: Optional[Literal["auto", "number", "integer", "date", "string", "boolean"]] = None
    maxbins: Optional[int] = Field(None, gt=0)
    minbins: Optional[int] = Field(None, gt=0)
    minstep: Optional[float] = Field(None, ge=0)
    step: Optional[float] = Field(None, gt=0)
    steps: Optional[List[float]] = None
    div: Optional[List[float]] = None
    base: Optional[float] = Field(None, gt=1)
    unit: Optional[str] = None
    min: Optional[Any] = None
    max: Optional[Any] = None
    sort: Optional[Literal["value", "count"]] = None

    def bin_options(self) -> dict:
        """Subset of options understood by the numeric chooser"""
        return self.model_dump(
            include={"maxbins", "step", "steps", "minstep", "div", "base"},
            exclude_none=True,
        )

    def date_options(self) -> dict:
        return self.model_dump(include={"unit", "maxbins", "minbins"}, exclude_none=True)


# ---------------------------------------------------
# Output Models
# ---------------------------------------------------
class HistogramRecord(BaseModel):
    value: Any
    count: int


def validate_options(model: type, **options) -> BaseModel:
    """Build an options model, converting validation failures to InvalidOptionsError"""
    try:
        return model(**options)
    except ValidationError as e:
        raise InvalidOptionsError(
            f"Invalid {model.__name__}: {e.errors()[0]['msg']}",
            suggestion=f"Accepted options: {', '.join(model.model_fields)}",
        ) from e
