"""Viewport size value types."""

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field


@dataclass(frozen=True, slots=True)
class ViewportSize:
    """Browser viewport dimensions."""

    width: int = 1280
    height: int = 720


class Dimensions(BaseModel):
    """Partial resize request; a missing or zero value keeps the current size."""

    model_config = ConfigDict(frozen=True)

    width: int | None = Field(default=None, ge=0, description="Target viewport width in CSS pixels")
    height: int | None = Field(default=None, ge=0, description="Target viewport height in CSS pixels")

    def apply_to(self, current: ViewportSize) -> ViewportSize:
        """Resolve the request against the current size."""
        return ViewportSize(width=self.width or current.width, height=self.height or current.height)
