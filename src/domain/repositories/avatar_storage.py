"""Avatar object storage protocol."""

from typing import Protocol


class IAvatarStorage(Protocol):
    """Stores avatar images keyed by profile id."""

    async def upload(self, profile_id: str, payload: bytes, content_type: str) -> str:
        """
        Store an avatar image.

        Args:
            profile_id: Owner of the image, used as the object key
            payload: Raw image bytes
            content_type: MIME type of the payload

        Returns:
            A URL the image can be fetched from
        """
        ...
