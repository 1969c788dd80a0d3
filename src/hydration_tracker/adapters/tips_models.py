"""Pydantic models for the remote tips document."""

from pydantic import BaseModel, ConfigDict, Field

from hydration_tracker.domain.tips import Tip


class TipPayload(BaseModel):
    """A single tip entry."""

    model_config = ConfigDict(strict=True)

    id: int
    title: str
    description: str
    image_url: str = Field(alias="imageUrl")

    def to_domain(self) -> Tip:
        return Tip(
            id=self.id,
            title=self.title,
            description=self.description,
            image_url=self.image_url,
        )


class TipsDocument(BaseModel):
    """Top-level tips document."""

    model_config = ConfigDict(strict=True)

    tips: list[TipPayload]
