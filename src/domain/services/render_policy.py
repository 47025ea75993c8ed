"""Access tier policy: what a stored profile is allowed to look like."""

from domain.entities.profile import EffectiveRenderConfig, Profile, ThemeVariant

FALLBACK_RENDER_CONFIG = EffectiveRenderConfig(
    theme_variant=ThemeVariant.MINIMAL.value,
    accent_color="#000000",
    customization_enabled=False,
)

PRO_TIER_LABEL = "PRO PROFILE"
FREE_TIER_LABEL = "Free Tier"


def compute_effective_config(profile: Profile) -> EffectiveRenderConfig:
    """Map a profile to the render configuration its tier permits.

    Entitled profiles with well-formed preferences get exactly what they
    stored. Everything else gets the fixed minimal fallback. The stored
    preferences are only read, so a later upgrade shows them again.
    """
    prefs = profile.design_preferences
    if profile.is_premium is True and prefs is not None and prefs.is_well_formed:
        return EffectiveRenderConfig(
            theme_variant=prefs.theme_variant,
            accent_color=prefs.accent_color,
            customization_enabled=True,
        )
    return FALLBACK_RENDER_CONFIG


def tier_label(config: EffectiveRenderConfig) -> str:
    """Badge text shown at the bottom of the public page."""
    return PRO_TIER_LABEL if config.customization_enabled else FREE_TIER_LABEL
