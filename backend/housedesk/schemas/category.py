"""Pydantic schemas for categories and classifier training samples."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from housedesk.core.sanitize import clean_multiline, clean_single_line

MAX_CATEGORY_NAME_LEN = 120
MAX_SAMPLE_LEN = 4000
MAX_SAMPLES = 10000


class CategoryIn(BaseModel):
    name: str = Field(min_length=2, max_length=MAX_CATEGORY_NAME_LEN)

    @field_validator("name", mode="before")
    @classmethod
    def normalize_name(cls, value: str) -> str:
        return clean_single_line(value)


class CategoryOut(BaseModel):
    id: int
    name: str

    class Config:
        from_attributes = True


class CategorySampleIn(BaseModel):
    category_id: int
    text: str = Field(min_length=1, max_length=MAX_SAMPLE_LEN)

    @field_validator("text", mode="before")
    @classmethod
    def normalize_text(cls, value: str) -> str:
        return clean_multiline(value)


class CategorySamplesIn(BaseModel):
    samples: list[CategorySampleIn] = Field(max_length=MAX_SAMPLES)


class CategorySamplesResult(BaseModel):
    count: int


class ClassifierTrainingOut(BaseModel):
    training: bool
