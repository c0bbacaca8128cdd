"""Pydantic models for upstream catalog payloads."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class SearchCandidate(BaseModel):
    """One entry of the upstream search results."""

    model_config = ConfigDict(extra="ignore", frozen=True, coerce_numbers_to_str=True)

    id: str
    title: str


class SearchResults(BaseModel):
    model_config = ConfigDict(extra="ignore")

    results: list[SearchCandidate] = []


class Episode(BaseModel):
    """Episode listing entry owned by the upstream catalog."""

    model_config = ConfigDict(
        extra="allow", populate_by_name=True, coerce_numbers_to_str=True
    )

    id: str
    number: int
    title: str | None = None
    japanese_title: str | None = Field(default=None, alias="japaneseTitle")
    # Additional fields are passed through due to extra="allow"


class EpisodeList(BaseModel):
    model_config = ConfigDict(extra="ignore")

    episodes: list[Episode] = []


class UpstreamEnvelope(BaseModel):
    """The ``{success, data}`` wrapper every upstream endpoint returns."""

    model_config = ConfigDict(extra="ignore")

    success: bool = False
    data: Any = None
