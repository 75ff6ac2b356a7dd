from __future__ import annotations


from pydantic import BaseModel, ConfigDict, Field, field_validator


class NewsItem(BaseModel):
    """Single persisted news item."""
    model_config = ConfigDict(extra='ignore')

    id: int = Field(gt=0)
    title: str
    date: str
    description: str
    image: str
    fullText: str
    media: list[str] | None = None

    @field_validator('media')
    @classmethod
    def _empty_media_is_absent(cls, value: list[str] | None) -> list[str] | None:
        return value or None

    def asset_paths(self) -> list[str]:
        """Main image first, then media files."""
        return [self.image, *(self.media or [])]


class NewsCreated(BaseModel):
    """Response for a created news item."""

    success: bool = True
    news: NewsItem
    message: str


class NewsDeleted(BaseModel):
    """Response for a deleted news item."""

    success: bool = True
    message: str
