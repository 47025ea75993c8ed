"""Public share URLs and outbound link normalization."""

from dataclasses import dataclass
from urllib.parse import quote

LINK_PLACEHOLDER = "#"

_KNOWN_SCHEMES = ("http://", "https://", "mailto:", "tel:")


@dataclass(frozen=True, slots=True)
class ShareLocator:
    """Builds the externally reachable URL of a profile.

    The same instance feeds both the QR payload and the exported contact
    card, so both always carry the same string for a given profile.
    """

    base_origin: str
    path_prefix: str = "/u/"

    @property
    def route_prefix(self) -> str:
        return route_prefix(self.path_prefix)

    def public_url_for(self, profile_id: str) -> str:
        origin = self.base_origin.rstrip("/")
        return f"{origin}{self.route_prefix}/{quote(profile_id, safe='')}"


def route_prefix(path_prefix: str) -> str:
    """Mount point of the public routes for a configured path prefix.

    >>> route_prefix("/u/")
    '/u'
    >>> route_prefix("/")
    ''
    """
    segment = path_prefix.strip("/")
    return f"/{segment}" if segment else ""


def normalize_link_url(url: str | None) -> str:
    """Turn a user-entered link into a followable destination.

    >>> normalize_link_url("github.com/jane")
    'https://github.com/jane'
    >>> normalize_link_url("")
    '#'
    """
    value = (url or "").strip()
    if not value:
        return LINK_PLACEHOLDER
    if value.lower().startswith(_KNOWN_SCHEMES):
        return value
    return f"https://{value}"
