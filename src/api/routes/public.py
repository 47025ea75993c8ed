"""Public profile endpoints served at the share URL."""

from urllib.parse import quote

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from api.dependencies.auth import OptionalUser
from api.v1.dependencies import get_profile_service, get_share_service
from api.v1.schemas.profile import PublicProfileResponse
from core.config import settings
from domain.services.contact_export import VCARD_MEDIA_TYPE, ascii_filename
from domain.services.profile_service import ProfileService
from domain.services.render_policy import compute_effective_config
from domain.services.share_locator import route_prefix
from domain.services.share_service import ShareService

router = APIRouter(prefix=route_prefix(settings.public_profile_path), tags=["public"])


@router.get(
    "/{profile_id}",
    response_model=PublicProfileResponse,
    summary="Public profile",
    responses={404: {"description": "Profile not found"}},
)
async def public_profile(
    profile_id: str,
    viewer: OptionalUser,
    service: ProfileService = Depends(get_profile_service),
    share: ShareService = Depends(get_share_service),
) -> PublicProfileResponse:
    """Public view of a profile, with the render configuration its tier allows."""
    profile = await service.get_profile(profile_id)
    return PublicProfileResponse.build(
        profile,
        compute_effective_config(profile),
        share.public_url(profile),
        is_owner=viewer is not None and viewer.id == profile.id,
    )


@router.get(
    "/{profile_id}/qr.png",
    summary="QR code of the public URL",
    response_class=Response,
    responses={
        200: {"content": {"image/png": {}}},
        404: {"description": "Profile not found"},
    },
)
async def public_profile_qr(
    profile_id: str,
    service: ProfileService = Depends(get_profile_service),
    share: ShareService = Depends(get_share_service),
) -> Response:
    """PNG QR code encoding the profile's public URL."""
    profile = await service.get_profile(profile_id)
    return Response(
        content=share.qr_png(profile),
        media_type="image/png",
        headers={"Cache-Control": "public, max-age=3600"},
    )


@router.get(
    "/{profile_id}/contact.vcf",
    summary="Download contact card",
    response_class=Response,
    responses={
        200: {"content": {"text/vcard": {}}},
        404: {"description": "Profile not found"},
    },
)
async def public_profile_contact(
    profile_id: str,
    service: ProfileService = Depends(get_profile_service),
    share: ShareService = Depends(get_share_service),
) -> Response:
    """vCard for saving the profile to an address book."""
    profile = await service.get_profile(profile_id)
    filename, vcard = share.contact_card(profile)
    return Response(
        content=vcard,
        media_type=VCARD_MEDIA_TYPE,
        headers={
            "Content-Disposition": (
                f'attachment; filename="{ascii_filename(filename)}"; '
                f"filename*=UTF-8''{quote(filename)}"
            )
        },
    )
