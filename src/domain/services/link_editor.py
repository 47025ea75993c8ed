"""Positional editing of a profile draft's link list.

Every operation returns a new draft and leaves its input untouched. An index
outside the list is a no-op; use ``link_index_in_range`` to report it.
"""

from dataclasses import replace
from enum import StrEnum

from domain.entities.profile import LinkEntry, Profile


class LinkField(StrEnum):
    """Editable fields of a link entry."""

    LABEL = "label"
    URL = "url"


def link_index_in_range(draft: Profile, index: int) -> bool:
    return 0 <= index < len(draft.links)


def _copy_links(draft: Profile) -> list[LinkEntry]:
    return [replace(link) for link in draft.links]


def add_link(draft: Profile) -> Profile:
    """Append an empty link entry."""
    return replace(draft, links=[*_copy_links(draft), LinkEntry()])


def update_link_field(draft: Profile, index: int, field: str, value: str) -> Profile:
    """Replace one field of the entry at ``index``.

    Raises:
        ValueError: If ``field`` is not an editable link field
    """
    link_field = LinkField(field)
    links = _copy_links(draft)
    if not link_index_in_range(draft, index):
        return replace(draft, links=links)
    links[index] = replace(links[index], **{link_field.value: value})
    return replace(draft, links=links)


def remove_link(draft: Profile, index: int) -> Profile:
    """Drop the entry at ``index``; later entries move up one position."""
    if not link_index_in_range(draft, index):
        return replace(draft, links=_copy_links(draft))
    return replace(
        draft,
        links=[replace(link) for i, link in enumerate(draft.links) if i != index],
    )
