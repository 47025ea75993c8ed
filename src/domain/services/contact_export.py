"""vCard export of a profile."""

import re
import unicodedata

from domain.entities.profile import Profile
from domain.services.share_locator import ShareLocator

VCARD_MEDIA_TYPE = "text/vcard; charset=utf-8"
VCARD_EXTENSION = ".vcf"

# Physical line limit, in octets, before folding
MAX_LINE_OCTETS = 75

_UNSAFE_FILENAME_CHARS = re.compile(r"[^\w.\-]")
_WHITESPACE = re.compile(r"\s+")


def _escape(value: str) -> str:
    """Escape a text value per vCard 3.0 so it stays on one line."""
    return (
        value.replace("\\", "\\\\")
        .replace(",", "\\,")
        .replace(";", "\\;")
        .replace("\r\n", "\\n")
        .replace("\n", "\\n")
        .replace("\r", "\\n")
    )


def _fold(line: str) -> str:
    """Fold a content line into chunks of at most 75 octets.

    Continuation lines start with a single space, which counts toward their
    limit. Multi-byte characters are never split.
    """
    if len(line.encode("utf-8")) <= MAX_LINE_OCTETS:
        return line

    chunks: list[str] = []
    current: list[str] = []
    size, limit = 0, MAX_LINE_OCTETS
    for char in line:
        width = len(char.encode("utf-8"))
        if size + width > limit:
            chunks.append("".join(current))
            current, size, limit = [], 0, MAX_LINE_OCTETS - 1
        current.append(char)
        size += width
    chunks.append("".join(current))
    return "\r\n ".join(chunks)


def _has_value(value: str | None) -> bool:
    return bool(value and value.strip())


def format_contact_record(profile: Profile, locator: ShareLocator) -> str:
    """Render a profile as a vCard 3.0 document.

    Field order is fixed. A field whose source value is empty or absent is
    left out entirely; the URL line is always present.
    """
    optional_fields = (
        ("TITLE", profile.job_title),
        ("ORG", profile.company),
        ("TEL;TYPE=CELL", profile.phone),
        ("EMAIL;TYPE=INTERNET", profile.email),
        ("NOTE", profile.bio),
    )

    lines = ["BEGIN:VCARD", "VERSION:3.0", f"FN:{_escape(profile.display_name)}"]
    lines.extend(
        f"{name}:{_escape((value or '').strip())}"
        for name, value in optional_fields
        if _has_value(value)
    )
    lines.append(f"URL:{locator.public_url_for(profile.id)}")
    lines.append("END:VCARD")
    return "\r\n".join(_fold(line) for line in lines) + "\r\n"


def _filename_stem(value: str) -> str:
    stem = _WHITESPACE.sub("_", unicodedata.normalize("NFC", value).strip())
    return _UNSAFE_FILENAME_CHARS.sub("", stem).strip("._")


def contact_filename(display_name: str) -> str:
    """File name offered for the downloaded contact card.

    Letters of any script are kept; path separators, quotes and control
    characters are dropped.
    """
    return f"{_filename_stem(display_name) or 'contact'}{VCARD_EXTENSION}"


def ascii_filename(filename: str) -> str:
    """ASCII-only stand-in for clients that ignore ``filename*``."""
    stem = filename.removesuffix(VCARD_EXTENSION)
    stem = unicodedata.normalize("NFKD", stem).encode("ascii", "ignore").decode("ascii")
    return f"{_filename_stem(stem) or 'contact'}{VCARD_EXTENSION}"
