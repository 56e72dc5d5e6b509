"""
Raw content records as stored in the site's database exports
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class _KeywordedRecord(BaseModel):
    keywords: List[str] = Field(default_factory=list, description="Alias terms that also link to this entry")

    @field_validator("keywords", mode="before")
    @classmethod
    def _none_as_empty(cls, value):
        return value or []


class CharacterRecord(_KeywordedRecord):
    """A character entry"""
    id: str
    name: str
    url: Optional[str] = None
    image: Optional[str] = None
    role: Optional[str] = None


class LoreRecord(_KeywordedRecord):
    """A lore entry (place, thing, concept or villain)"""
    id: str
    title: str
    description: Optional[str] = None
    image: Optional[str] = None
    image_gallery: List[str] = Field(default_factory=list)
    type: Optional[str] = Field(default=None, description="Lore category such as place, concept or villain")

    @field_validator("image_gallery", mode="before")
    @classmethod
    def _gallery_none_as_empty(cls, value):
        return value or []


class EpisodeRecord(_KeywordedRecord):
    """An episode entry nested under its season"""
    model_config = ConfigDict(populate_by_name=True)

    title: str
    description: Optional[str] = None
    youtube_link: Optional[str] = Field(default=None, alias="youtubeLink")
    image: Optional[str] = None
