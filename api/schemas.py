"""Pydantic schemas for the video dataset and API responses."""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class VideoRecord(BaseModel):
    """One entry of the bundled videos.json dataset.

    Only ``id`` and ``title`` matter for redirects; other keys
    (description, thumbnail, ...) are ignored. A null or missing title
    is kept as ``""`` and yields an empty slug.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: str = Field(min_length=1)
    title: str = ""

    @field_validator("title", mode="before")
    @classmethod
    def null_title_is_empty(cls, v: object) -> object:
        return "" if v is None else v


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    service: str


class ReadyResponse(HealthResponse):
    """Readiness response with lookup table status."""

    videos_loaded: int
