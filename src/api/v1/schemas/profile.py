"""Pydantic schemas for Profile API."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from domain.entities.profile import EffectiveRenderConfig, Profile
from domain.services.render_policy import tier_label
from domain.services.share_locator import normalize_link_url


class LinkSchema(BaseModel):
    """One labeled link, as edited."""

    label: str = Field("", max_length=100)
    url: str = Field("", max_length=2048)


class LinkResponse(BaseModel):
    """One stored link, reported as is."""

    label: str
    url: str


class DesignPreferencesSchema(BaseModel):
    """Theme choice submitted by the editor."""

    theme_variant: Literal["minimal", "bold", "dark"] = "minimal"
    accent_color: str = Field("#000000", pattern=r"^#[0-9A-Fa-f]{6}$")

    @field_validator("accent_color")
    @classmethod
    def validate_color(cls, v: str) -> str:
        return v.upper()


class ProfileDraftRequest(BaseModel):
    """Schema for saving the whole editor draft."""

    display_name: str = Field(..., min_length=1, max_length=100)
    bio: str = Field("", max_length=1000)
    job_title: str | None = Field(None, max_length=100)
    company: str | None = Field(None, max_length=100)
    phone: str | None = Field(None, max_length=40)
    email: str | None = Field(None, max_length=255)
    links: list[LinkSchema] = Field(default_factory=list)
    design_preferences: DesignPreferencesSchema | None = None

    @field_validator("display_name")
    @classmethod
    def validate_display_name(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("display_name must not be blank")
        return v.strip()


class LinkUpdateRequest(BaseModel):
    """Schema for editing one link in place."""

    label: str | None = Field(None, max_length=100)
    url: str | None = Field(None, max_length=2048)


class EntitlementRequest(BaseModel):
    """Schema for changing a profile's premium flag."""

    is_premium: bool


class RenderConfigResponse(BaseModel):
    """Effective configuration the page must be drawn with."""

    theme_variant: str
    accent_color: str
    customization_enabled: bool
    grayscale: bool

    @classmethod
    def from_config(cls, config: EffectiveRenderConfig) -> "RenderConfigResponse":
        return cls(
            theme_variant=config.theme_variant,
            accent_color=config.accent_color,
            customization_enabled=config.customization_enabled,
            grayscale=config.grayscale,
        )


class StoredDesignPreferences(BaseModel):
    """Stored preferences, reported verbatim even when malformed."""

    theme_variant: str
    accent_color: str


class ProfileResponse(BaseModel):
    """Owner view of a profile."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "c5a1e7d4-0b2f-4d55-9d0e-9f6b3b1a2c11",
                "display_name": "Jane Doe",
                "bio": "Exploring the world of QR identities.",
                "links": [{"label": "Portfolio", "url": "https://example.com"}],
                "is_premium": False,
                "design_preferences": {"theme_variant": "dark", "accent_color": "#FF5733"},
                "render": {
                    "theme_variant": "minimal",
                    "accent_color": "#000000",
                    "customization_enabled": False,
                    "grayscale": True,
                },
                "public_url": "https://qrpass.example/u/c5a1e7d4-0b2f-4d55-9d0e-9f6b3b1a2c11",
            }
        },
    )

    id: str
    display_name: str
    bio: str
    job_title: str | None = None
    company: str | None = None
    phone: str | None = None
    email: str | None = None
    avatar_url: str | None = None
    links: list[LinkResponse]
    is_premium: bool
    design_preferences: StoredDesignPreferences
    render: RenderConfigResponse
    public_url: str
    updated_at: datetime

    @classmethod
    def build(
        cls, profile: Profile, config: EffectiveRenderConfig, public_url: str
    ) -> "ProfileResponse":
        return cls(
            id=profile.id,
            display_name=profile.display_name,
            bio=profile.bio,
            job_title=profile.job_title,
            company=profile.company,
            phone=profile.phone,
            email=profile.email,
            avatar_url=profile.avatar_url,
            links=[LinkResponse(label=link.label, url=link.url) for link in profile.links],
            is_premium=profile.is_premium,
            design_preferences=StoredDesignPreferences(
                theme_variant=str(profile.design_preferences.theme_variant),
                accent_color=str(profile.design_preferences.accent_color),
            ),
            render=RenderConfigResponse.from_config(config),
            public_url=public_url,
            updated_at=profile.updated_at,
        )


class ProfileDetailResponse(BaseModel):
    """Schema for single Profile."""

    data: ProfileResponse


class PublicLink(BaseModel):
    """A link ready to be followed."""

    label: str
    href: str


class PublicProfileResponse(BaseModel):
    """What a visitor of ``/u/{id}`` gets to see."""

    id: str
    display_name: str
    bio: str
    job_title: str | None = None
    company: str | None = None
    avatar_url: str | None = None
    links: list[PublicLink]
    render: RenderConfigResponse
    tier_label: str
    public_url: str
    qr_url: str
    contact_url: str
    is_owner: bool = False

    @classmethod
    def build(
        cls,
        profile: Profile,
        config: EffectiveRenderConfig,
        public_url: str,
        is_owner: bool = False,
    ) -> "PublicProfileResponse":
        return cls(
            id=profile.id,
            display_name=profile.display_name,
            bio=profile.bio,
            job_title=profile.job_title,
            company=profile.company,
            avatar_url=profile.avatar_url,
            links=[
                PublicLink(label=link.label or link.url, href=normalize_link_url(link.url))
                for link in profile.links
                if link.label.strip() or link.url.strip()
            ],
            render=RenderConfigResponse.from_config(config),
            tier_label=tier_label(config),
            public_url=public_url,
            qr_url=f"{public_url}/qr.png",
            contact_url=f"{public_url}/contact.vcf",
            is_owner=is_owner,
        )
