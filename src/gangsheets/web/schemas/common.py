"""Common Pydantic schemas shared across requests and responses."""

from enum import Enum

from pydantic import BaseModel, Field, model_validator

from gangsheets.domain.value_objects import PackingSettings


class StatusEnum(str, Enum):
    """Gangsheet status options."""

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class PackingSettingsSchema(BaseModel):
    """Packing settings in inches."""

    roll_width: float = Field(..., gt=0, le=120, description="Roll width in inches")
    roll_length: float | None = Field(
        default=None,
        gt=0,
        description="Maximum roll length in inches; null for an unbounded roll",
    )
    dpi: int = Field(default=300, gt=0, le=2400, description="Artwork resolution")
    gap: float = Field(default=0.0, ge=0, le=12, description="Gap between designs")
    margin_top: float = Field(default=0.0, ge=0, description="Top margin in inches")
    margin_left: float = Field(default=0.0, ge=0, description="Left margin in inches")
    border: bool = Field(default=False, description="Outline designs on the print")
    border_size: float = Field(default=0.0, ge=0, le=1, description="Outline width")
    border_color: str = Field(
        default="red", min_length=1, max_length=32, description="Outline color"
    )

    @model_validator(mode="after")
    def check_margin_fits_roll(self) -> "PackingSettingsSchema":
        if self.margin_left >= self.roll_width:
            raise ValueError("margin_left must be smaller than roll_width")
        return self

    def to_domain(self) -> PackingSettings:
        return PackingSettings.from_inches(**self.model_dump())

    @classmethod
    def from_domain(cls, settings: PackingSettings) -> "PackingSettingsSchema":
        return cls.model_construct(**settings.to_inches_dict())
