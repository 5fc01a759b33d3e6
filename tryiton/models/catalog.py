"""Try-on backend response models."""

from enum import Enum

from pydantic import BaseModel, Field


class ItemCategory(str, Enum):
    ACCESSORY = "accessory"
    SHOE = "shoe"
    CLOTHING = "clothing"
    GLASSES = "glasses"
    GENERAL = "general"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()


class Template(BaseModel):
    """A user photo uploaded as a try-on template."""

    id: int
    filename: str
    category: str

    def image_url(self, base_url: str) -> str:
        return f"{base_url.rstrip('/')}/images/templates/{self.filename}"


class TryOnResult(BaseModel):
    """A generated try-on image."""

    id: int
    filename: str
    item_category: str

    def image_url(self, base_url: str) -> str:
        return f"{base_url.rstrip('/')}/images/results/{self.filename}"


class TryOnResponseData(BaseModel):
    """Response to a try-on request."""

    result_ids: list[int] = Field(default_factory=list)
    result_urls: list[str] = Field(default_factory=list)
