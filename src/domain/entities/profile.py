"""Profile domain entity and its value objects."""

import re
from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import Any

_HEX_COLOR = re.compile(r"^#[0-9A-Fa-f]{6}$")

DEFAULT_DISPLAY_NAME = "New User"


class ThemeVariant(StrEnum):
    """Visual themes a public page can be drawn with."""

    MINIMAL = "minimal"
    BOLD = "bold"
    DARK = "dark"


_THEME_VALUES = frozenset(variant.value for variant in ThemeVariant)


@dataclass
class LinkEntry:
    """One labeled outbound URL in a profile's link list."""

    label: str = ""
    url: str = ""

    @classmethod
    def from_document(cls, doc: Any) -> "LinkEntry":
        if not isinstance(doc, dict):
            return cls()
        return cls(label=str(doc.get("label") or ""), url=str(doc.get("url") or ""))

    def to_document(self) -> dict[str, str]:
        return {"label": self.label, "url": self.url}


@dataclass
class DesignPreferences:
    """Stored theme choice.

    Values are kept exactly as written so that a lapsed entitlement never
    destroys what the user picked; ``is_well_formed`` is the only check.
    """

    theme_variant: str = ThemeVariant.MINIMAL.value
    accent_color: str = "#000000"
    # Stored value that was not a mapping; written back untouched
    raw: Any = None

    @property
    def is_well_formed(self) -> bool:
        return (
            self.raw is None
            and isinstance(self.theme_variant, str)
            and self.theme_variant in _THEME_VALUES
            and isinstance(self.accent_color, str)
            and _HEX_COLOR.match(self.accent_color) is not None
        )

    @classmethod
    def from_document(cls, doc: Any) -> "DesignPreferences":
        """Read stored preferences; absent keys default, others pass through.

        A stored value that is not a mapping reads as the defaults but is kept
        in ``raw`` so the next save does not overwrite it.
        """
        if doc is None:
            return cls()
        if not isinstance(doc, dict):
            return cls(raw=doc)
        return cls(
            theme_variant=doc.get("theme", doc.get("theme_variant", ThemeVariant.MINIMAL.value)),
            accent_color=doc.get("accentColor", doc.get("accent_color", "#000000")),
        )

    def to_document(self) -> Any:
        if self.raw is not None:
            return self.raw
        return {"theme": self.theme_variant, "accentColor": self.accent_color}


@dataclass(frozen=True, slots=True)
class EffectiveRenderConfig:
    """Theme actually used to draw a page. Derived on every read, never stored."""

    theme_variant: str
    accent_color: str
    customization_enabled: bool

    @property
    def grayscale(self) -> bool:
        """Whole-page desaturation applies whenever customization is off."""
        return not self.customization_enabled


@dataclass
class Profile:
    """Domain entity for a user's public identity document."""

    id: str
    display_name: str = DEFAULT_DISPLAY_NAME
    bio: str = ""
    job_title: str | None = None
    company: str | None = None
    phone: str | None = None
    email: str | None = None
    avatar_url: str | None = None
    links: list[LinkEntry] = field(default_factory=list)
    is_premium: bool = False
    design_preferences: DesignPreferences = field(default_factory=DesignPreferences)
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    def __post_init__(self) -> None:
        """Keep preferences present and updated_at no older than created_at."""
        if self.design_preferences is None:
            self.design_preferences = DesignPreferences()
        if self.updated_at < self.created_at:
            self.updated_at = self.created_at

    @classmethod
    def from_document(cls, profile_id: str, doc: dict[str, Any]) -> "Profile":
        """Build a profile from a stored document.

        Accepts camelCase and snake_case keys. Unknown keys are ignored and
        missing optional keys fall back to their defaults.
        """

        def pick(*keys: str) -> Any:
            for key in keys:
                if doc.get(key) is not None:
                    return doc[key]
            return None

        raw_links = pick("links") or []
        return cls(
            id=profile_id,
            display_name=pick("displayName", "display_name") or DEFAULT_DISPLAY_NAME,
            bio=pick("bio") or "",
            job_title=pick("jobTitle", "job_title"),
            company=pick("company"),
            phone=pick("phone"),
            email=pick("email"),
            avatar_url=pick("avatarUrl", "avatar_url"),
            links=[LinkEntry.from_document(item) for item in raw_links]
            if isinstance(raw_links, list)
            else [],
            is_premium=pick("isPremium", "is_premium") is True,
            design_preferences=DesignPreferences.from_document(
                pick("designPrefs", "design_preferences")
            ),
        )

    def to_document(self) -> dict[str, Any]:
        """Serialize to the stored document shape."""
        return {
            "uid": self.id,
            "displayName": self.display_name,
            "bio": self.bio,
            "jobTitle": self.job_title,
            "company": self.company,
            "phone": self.phone,
            "email": self.email,
            "avatarUrl": self.avatar_url,
            "links": [link.to_document() for link in self.links],
            "isPremium": self.is_premium,
            "designPrefs": self.design_preferences.to_document(),
        }
