from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .models import StyleConfig, is_utf8_text

# Shared type for incoming targetDate which can be a date, datetime, or ISO8601 string
TargetDateInput = Union[date, datetime, str]

TITLE_MAX_LENGTH = 200


def _parse_target_date(value: Optional[TargetDateInput]) -> Optional[datetime]:
    """
    Internal helper to normalize targetDate input into an aware UTC datetime.
    - If value is a string, parse via datetime.fromisoformat ('Z' suffix allowed);
      a bare date is promoted to 00:00.
    - If value is a date (not datetime), convert to datetime at 00:00.
    - Naive datetimes are taken to be UTC.
    """
    if value is None:
        return None

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day, 0, 0, 0)
    elif isinstance(value, str):
        s = value.strip()
        if s.endswith("Z") or s.endswith("z"):
            s = s[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(s)
        except ValueError:
            try:
                d = date.fromisoformat(s)
            except ValueError as e:
                raise ValueError(
                    "Invalid targetDate format. Use an ISO8601 date or datetime string "
                    "(e.g., '2030-01-31' or '2030-01-31T13:45:00+01:00')."
                ) from e
            parsed = datetime(d.year, d.month, d.day, 0, 0, 0)
    else:
        raise ValueError("Invalid type for targetDate; expected date, datetime, or ISO8601 string.")

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def _require_future(value: datetime) -> datetime:
    if value <= datetime.now(timezone.utc):
        raise ValueError("targetDate must be in the future")
    return value


def _normalize_title(value: Optional[str]) -> Optional[str]:
    """Enforce the 200 character limit and UTF-8 encodability, strip, map blank to None."""
    if value is None:
        return None
    if len(value) > TITLE_MAX_LENGTH:
        raise ValueError(f"title must be at most {TITLE_MAX_LENGTH} characters")
    if not is_utf8_text(value):
        raise ValueError("title must be valid UTF-8 text")
    return value.strip() or None


# PUBLIC_INTERFACE
class CountdownCreate(BaseModel):
    """
    Schema for creating a new countdown.

    `style` is taken as loosely-typed input: unknown or invalid values are
    replaced by the default style values rather than rejected.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "title": "Product launch",
                "targetDate": "2030-06-01T09:00:00+02:00",
                "style": {
                    "backgroundColor": "#1E1E2E",
                    "textColor": "#FFFFFF",
                    "fontSize": 72,
                    "fontFamily": "DejaVuSans",
                },
            }
        },
    )

    title: Optional[str] = Field(default=None, description="Optional display title (max 200 characters)")
    target_date: datetime = Field(..., description="Target instant; ISO8601, must be in the future")
    style: Dict[str, Any] = Field(default_factory=dict, description="Visual style (colors, font size, font family)")

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: Optional[str]) -> Optional[str]:
        return _normalize_title(v)

    @field_validator("target_date", mode="before")
    @classmethod
    def parse_target_date(cls, v: Optional[TargetDateInput]) -> Optional[datetime]:
        """
        Normalize targetDate from str/date/datetime to an aware UTC datetime.
        """
        if v is None:
            raise ValueError("targetDate is required")
        return _require_future(_parse_target_date(v))  # type: ignore[arg-type]

    @field_validator("style", mode="before")
    @classmethod
    def default_style(cls, v: Any) -> Any:
        # Anything that is not an object is treated as "no style given"
        return v if isinstance(v, dict) else {}

    def style_config(self) -> StyleConfig:
        """Return the sanitized style, falling back to the defaults."""
        return StyleConfig.from_input(self.style)


# PUBLIC_INTERFACE
class CountdownUpdate(BaseModel):
    """
    Schema for updating an existing countdown.
    All fields are optional; only provided fields will be updated. Style keys
    merge into the stored style and invalid values keep the stored value.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "title": "Product launch (delayed)",
                "targetDate": "2030-07-01T09:00:00+02:00",
                "style": {"textColor": "#FFCC00"},
            }
        },
    )

    title: Optional[str] = Field(default=None, description="Optional display title (max 200 characters)")
    target_date: Optional[datetime] = Field(default=None, description="Target instant; must be in the future")
    style: Optional[Dict[str, Any]] = Field(default=None, description="Style keys to change")

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: Optional[str]) -> Optional[str]:
        return _normalize_title(v)

    @field_validator("target_date", mode="before")
    @classmethod
    def parse_target_date(cls, v: Optional[TargetDateInput]) -> Optional[datetime]:
        parsed = _parse_target_date(v)
        return None if parsed is None else _require_future(parsed)

    @field_validator("style", mode="before")
    @classmethod
    def default_style(cls, v: Any) -> Any:
        return v if isinstance(v, dict) else None


# PUBLIC_INTERFACE
class StyleOut(BaseModel):
    """Style as returned by the API."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    background_color: str = Field(..., description="Background color, #RRGGBB")
    text_color: str = Field(..., description="Text color, #RRGGBB")
    font_size: int = Field(..., description="Requested value font size (rendered clamped to 64..96)")
    font_family: str = Field(..., description="Preferred font family")


# PUBLIC_INTERFACE
class CountdownOut(BaseModel):
    """
    Schema returned by the API for a countdown.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "id": "9f1c2a7be0d34c55a3c1f0b7e2d4a6c8",
                "title": "Product launch",
                "targetDate": "2030-06-01T07:00:00Z",
                "style": {
                    "backgroundColor": "#1E1E2E",
                    "textColor": "#FFFFFF",
                    "fontSize": 72,
                    "fontFamily": "DejaVuSans",
                },
                "createdAt": "2026-01-25T10:15:30.123456Z",
                "updatedAt": "2026-01-26T09:00:00.000001Z",
            }
        },
    )

    id: str = Field(..., description="Unique identifier of the countdown")
    title: Optional[str] = Field(default=None, description="Display title")
    target_date: datetime = Field(..., description="Target instant as an ISO8601 datetime")
    style: StyleOut = Field(..., description="Visual style")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")
