"""Derived share artifacts: public URL, QR image, contact card."""

from typing import Protocol

from domain.entities.profile import Profile
from domain.services.contact_export import contact_filename, format_contact_record
from domain.services.share_locator import ShareLocator

QR_ERROR_CORRECTION = "M"


class IQRRenderer(Protocol):
    """Anything that can draw a scannable code for a text payload."""

    def render_png(self, payload: str, error_correction: str = "M") -> bytes:
        ...


class ShareService:
    """Produces the artifacts a profile is shared through.

    The QR payload and the contact card URL both come from the same
    locator, so they cannot drift apart.
    """

    def __init__(self, locator: ShareLocator, qr_renderer: IQRRenderer) -> None:
        self._locator = locator
        self._qr_renderer = qr_renderer

    @property
    def locator(self) -> ShareLocator:
        return self._locator

    def public_url(self, profile: Profile) -> str:
        return self._locator.public_url_for(profile.id)

    def qr_png(self, profile: Profile) -> bytes:
        return self._qr_renderer.render_png(self.public_url(profile), QR_ERROR_CORRECTION)

    def contact_card(self, profile: Profile) -> tuple[str, str]:
        """Return ``(filename, vcard_text)`` for a download."""
        return contact_filename(profile.display_name), format_contact_record(profile, self._locator)
