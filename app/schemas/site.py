"""
Pydantic schemas for the site generation API.

These schemas define the REST contract used by app/routers/sites.py and
app/routers/uploads.py.
"""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.ai.site.assets import is_asset_reference
from app.ai.site.generator.contracts import (
    DEFAULT_ACCENT_COLOR,
    DEFAULT_PRIMARY_COLOR,
    Brief,
    ColorPair,
)

HEX_COLOR_PATTERN = r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{4}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$"


# ============== GENERATE ==============

class ColorsIn(BaseModel):
    """Color pair as CSS hex values."""
    primary: str = Field(default=DEFAULT_PRIMARY_COLOR, pattern=HEX_COLOR_PATTERN)
    accent: str = Field(default=DEFAULT_ACCENT_COLOR, pattern=HEX_COLOR_PATTERN)


class AssetsIn(BaseModel):
    """Asset references: data:image URIs or /uploads/... paths from POST /upload."""
    logo: Optional[str] = None
    background: Optional[str] = None

    @field_validator("logo", "background")
    @classmethod
    def _check_reference(cls, value: Optional[str]) -> Optional[str]:
        if value is None or not value.strip():
            return None
        value = value.strip()
        if not is_asset_reference(value):
            raise ValueError("must be a data:image URI or an /uploads/... path returned by /upload")
        return value


class GenerateSiteRequest(BaseModel):
    """
    Request schema for POST /generate-site.

    At least one of name/description is required; the router reports a
    missing pair as 400, matching the error payload shape of the API.
    """
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "Moon Cat",
                "ticker": "MCAT",
                "description": "A community-owned meme coin for cat people.",
                "telegram": "https://t.me/mooncat",
                "twitter": "@mooncat",
                "colors": {"primary": "#0b0b0b", "accent": "#f59e0b"},
                "assets": {"logo": "/uploads/1718000000000-logo.png"},
            }
        }
    )

    name: Optional[str] = Field(default=None, max_length=120)
    ticker: Optional[str] = Field(default=None, max_length=20)
    description: Optional[str] = Field(default=None, max_length=5000)
    telegram: Optional[str] = Field(default=None, max_length=300)
    twitter: Optional[str] = Field(default=None, max_length=300)
    theme: Literal["dark", "light"] = "dark"
    colors: ColorsIn = Field(default_factory=ColorsIn)
    assets: AssetsIn = Field(default_factory=AssetsIn)

    @property
    def has_required_fields(self) -> bool:
        return bool((self.name or "").strip() or (self.description or "").strip())

    def to_brief(self) -> Brief:
        return Brief(
            name=self.name,
            ticker=self.ticker,
            description=self.description,
            telegram=self.telegram,
            twitter=self.twitter,
            colors=ColorPair(primary=self.colors.primary, accent=self.colors.accent),
            logo=self.assets.logo,
            background=self.assets.background,
            theme=self.theme,
        )


class GenerateSiteResponse(BaseModel):
    """Response schema for POST /generate-site."""
    id: str
    url: str
    html: str
    attempts: int = Field(description="Provider calls made for this page")
    fallback: bool = Field(default=False, description="True when the local fallback page was served")


# ============== UPLOAD / PUBLISH ==============

class UploadResponse(BaseModel):
    """Stored upload: path to use in assets, url to preview it."""
    path: str
    url: str


class PublishResponse(BaseModel):
    id: str
    url: str


class ErrorResponse(BaseModel):
    """Error payload shared by every endpoint."""
    error: str
    message: str
