"""Pydantic schemas for the state forest models.

These schemas validate rows before they are written and serialize ORM rows
for callers. Natural keys are normalized here so that writes and lookups
agree on capitalization.
"""

import string
from typing import Optional
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .constants import STATE_ABBREVIATION_LENGTH


class ForeignKeyPolicy(str, Enum):
    """Referential action applied by ON DELETE / ON UPDATE."""
    CASCADE = "cascade"
    RESTRICT = "restrict"

    @property
    def sql(self) -> str:
        return self.value.upper()


# Natural key normalization
def normalize_state_name(name: str) -> str:
    return name.strip()


def normalize_abbreviation(abrv: str) -> str:
    return abrv.strip().upper()


def normalize_forest_name(name: str) -> str:
    """Capitalize every word: ``"blackwater river"`` -> ``"Blackwater River"``."""
    return string.capwords(name.strip())


def normalize_activity_name(name: str) -> str:
    return " ".join(name.split()).lower()


def _require_text(v: str, label: str) -> str:
    if not v:
        raise ValueError(f"{label} must not be blank")
    return v


def _check_abbreviation(v):
    if isinstance(v, str):
        v = normalize_abbreviation(v)
        if not v.isalpha():
            raise ValueError("State abbreviation must be two letters")
    return v


# State schemas
class StateBase(BaseModel):
    name: str
    abrv: str = Field(min_length=STATE_ABBREVIATION_LENGTH, max_length=STATE_ABBREVIATION_LENGTH)

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        return _require_text(normalize_state_name(v), "State name")

    @field_validator('abrv', mode='before')
    @classmethod
    def validate_abrv(cls, v):
        return _check_abbreviation(v)


class StateCreate(StateBase):
    pass


class StateUpdate(BaseModel):
    name: Optional[str] = None
    abrv: Optional[str] = Field(
        default=None,
        min_length=STATE_ABBREVIATION_LENGTH,
        max_length=STATE_ABBREVIATION_LENGTH,
    )

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        if v is None:
            return v
        return _require_text(normalize_state_name(v), "State name")

    @field_validator('abrv', mode='before')
    @classmethod
    def validate_abrv(cls, v):
        return _check_abbreviation(v)


class State(StateBase):
    id: int

    model_config = ConfigDict(from_attributes=True)


# State forest schemas
class StateForestBase(BaseModel):
    name: str
    acres: int = Field(ge=0)

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        return _require_text(normalize_forest_name(v), "Forest name")


class StateForestCreate(StateForestBase):
    state_id: Optional[int] = None  # Resolved from the state key by the loader


class StateForestUpdate(BaseModel):
    name: Optional[str] = None
    acres: Optional[int] = Field(default=None, ge=0)
    state_id: Optional[int] = None

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        if v is None:
            return v
        return _require_text(normalize_forest_name(v), "Forest name")


class StateForest(StateForestBase):
    id: int
    state_id: int

    model_config = ConfigDict(from_attributes=True)


# Activity schemas
class ActivityBase(BaseModel):
    name: str

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        return _require_text(normalize_activity_name(v), "Activity name")


class ActivityCreate(ActivityBase):
    pass


class ActivityUpdate(BaseModel):
    name: Optional[str] = None

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        if v is None:
            return v
        return _require_text(normalize_activity_name(v), "Activity name")


class Activity(ActivityBase):
    id: int

    model_config = ConfigDict(from_attributes=True)


# Join table schemas
class StateForestActivity(BaseModel):
    forest_id: int
    activity_id: int

    model_config = ConfigDict(from_attributes=True)

