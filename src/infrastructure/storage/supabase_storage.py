"""Supabase Storage implementation of avatar storage."""

import logging

import httpx

from core.config import settings
from core.exceptions import UpstreamUnavailableError

logger = logging.getLogger(__name__)

_EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/gif": "gif",
    "image/webp": "webp",
}


class SupabaseAvatarStorage:
    """Uploads avatars to a Supabase Storage bucket over its REST API.

    Objects are written with the service role key and upserted, so a new
    upload replaces the previous avatar of the same profile.
    """

    def __init__(
        self,
        base_url: str = settings.supabase_url,
        service_key: str = settings.supabase_service_role_key,
        bucket: str = settings.avatar_bucket,
        timeout: float = settings.storage_timeout_seconds,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._service_key = service_key
        self._bucket = bucket
        self._timeout = timeout
        self._transport = transport

    def object_path(self, profile_id: str, content_type: str) -> str:
        extension = _EXTENSIONS.get(content_type, "bin")
        return f"{profile_id}/avatar.{extension}"

    def public_url(self, object_path: str) -> str:
        return f"{self._base_url}/storage/v1/object/public/{self._bucket}/{object_path}"

    async def upload(self, profile_id: str, payload: bytes, content_type: str) -> str:
        """
        Upload an avatar and return its public URL.

        Raises:
            UpstreamUnavailableError: If storage is not configured or the upload fails
        """
        if not self._base_url or not self._service_key:
            raise UpstreamUnavailableError("object_store", "Avatar storage is not configured")

        object_path = self.object_path(profile_id, content_type)
        upload_url = f"{self._base_url}/storage/v1/object/{self._bucket}/{object_path}"
        headers = {
            "Authorization": f"Bearer {self._service_key}",
            "apikey": self._service_key,
            "Content-Type": content_type,
            "x-upsert": "true",
        }

        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                response = await client.post(
                    upload_url,
                    content=payload,
                    headers=headers,
                    timeout=self._timeout,
                )
                response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.warning("Avatar upload failed for profile %s: %s", profile_id, exc)
            raise UpstreamUnavailableError("object_store") from exc

        logger.info("Uploaded avatar for profile %s (%d bytes)", profile_id, len(payload))
        return self.public_url(object_path)
