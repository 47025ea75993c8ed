"""Profile editor API routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, File, UploadFile, status

from api.dependencies.auth import CurrentUser, ServiceUser
from api.v1.dependencies import get_profile_service, get_share_service
from api.v1.schemas.profile import (
    EntitlementRequest,
    LinkUpdateRequest,
    ProfileDetailResponse,
    ProfileDraftRequest,
    ProfileResponse,
)
from domain.entities.profile import DesignPreferences, LinkEntry, Profile
from domain.services.profile_service import ProfileDraft, ProfileService
from domain.services.render_policy import compute_effective_config
from domain.services.share_service import ShareService

router = APIRouter(prefix="/me", tags=["profile"])


async def get_current_profile_id(
    user: CurrentUser,
    service: ProfileService = Depends(get_profile_service),
) -> str:
    """Resolve the caller's profile id, seeding the profile on first use."""
    await service.ensure_profile(user.id, user.display_name)
    return user.id


CurrentProfileId = Annotated[str, Depends(get_current_profile_id)]


def _detail(profile: Profile, share: ShareService) -> ProfileDetailResponse:
    return ProfileDetailResponse(
        data=ProfileResponse.build(
            profile,
            compute_effective_config(profile),
            share.public_url(profile),
        )
    )


@router.get(
    "",
    response_model=ProfileDetailResponse,
    summary="Get my profile",
)
async def get_my_profile(
    profile_id: CurrentProfileId,
    service: ProfileService = Depends(get_profile_service),
    share: ShareService = Depends(get_share_service),
) -> ProfileDetailResponse:
    """Get the caller's profile together with the render configuration it is entitled to."""
    profile = await service.get_profile(profile_id)
    return _detail(profile, share)


@router.put(
    "",
    response_model=ProfileDetailResponse,
    summary="Save my profile",
    responses={
        200: {"description": "Profile saved"},
        422: {"description": "Draft failed validation"},
    },
)
async def save_my_profile(
    body: ProfileDraftRequest,
    profile_id: CurrentProfileId,
    service: ProfileService = Depends(get_profile_service),
    share: ShareService = Depends(get_share_service),
) -> ProfileDetailResponse:
    """Save the whole editor draft. Design preferences are ignored on the free tier."""
    draft = ProfileDraft(
        display_name=body.display_name,
        bio=body.bio,
        job_title=body.job_title,
        company=body.company,
        phone=body.phone,
        email=body.email,
        links=[LinkEntry(label=link.label, url=link.url) for link in body.links],
        design_preferences=DesignPreferences(
            theme_variant=body.design_preferences.theme_variant,
            accent_color=body.design_preferences.accent_color,
        )
        if body.design_preferences
        else None,
    )
    profile = await service.save_draft(profile_id, draft)
    return _detail(profile, share)


@router.post(
    "/links",
    response_model=ProfileDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Append an empty link",
)
async def add_link(
    profile_id: CurrentProfileId,
    service: ProfileService = Depends(get_profile_service),
    share: ShareService = Depends(get_share_service),
) -> ProfileDetailResponse:
    """Append an empty link at the end of the list."""
    profile = await service.add_link(profile_id)
    return _detail(profile, share)


@router.patch(
    "/links/{index}",
    response_model=ProfileDetailResponse,
    summary="Edit a link",
    responses={
        200: {"description": "Link updated"},
        404: {"description": "No link at this position"},
    },
)
async def update_link(
    index: int,
    body: LinkUpdateRequest,
    profile_id: CurrentProfileId,
    service: ProfileService = Depends(get_profile_service),
    share: ShareService = Depends(get_share_service),
) -> ProfileDetailResponse:
    """Change the label and/or url of the link at a position."""
    profile = await service.update_link(profile_id, index, label=body.label, url=body.url)
    return _detail(profile, share)


@router.delete(
    "/links/{index}",
    response_model=ProfileDetailResponse,
    summary="Remove a link",
    responses={
        200: {"description": "Link removed"},
        404: {"description": "No link at this position"},
    },
)
async def remove_link(
    index: int,
    profile_id: CurrentProfileId,
    service: ProfileService = Depends(get_profile_service),
    share: ShareService = Depends(get_share_service),
) -> ProfileDetailResponse:
    """Remove a link; the ones after it move up."""
    profile = await service.remove_link(profile_id, index)
    return _detail(profile, share)


@router.post(
    "/avatar",
    response_model=ProfileDetailResponse,
    summary="Upload an avatar",
    responses={
        200: {"description": "Avatar stored"},
        400: {"description": "Image too large or of an unsupported type"},
        503: {"description": "Object storage unavailable"},
    },
)
async def upload_avatar(
    profile_id: CurrentProfileId,
    file: UploadFile = File(...),
    service: ProfileService = Depends(get_profile_service),
    share: ShareService = Depends(get_share_service),
) -> ProfileDetailResponse:
    """Upload a new avatar image (max 5 MB)."""
    # One byte past the limit is enough to reject an oversized upload
    payload = await file.read(service.max_avatar_bytes + 1)
    profile = await service.set_avatar(
        profile_id, payload, file.content_type or "application/octet-stream"
    )
    return _detail(profile, share)


# Entitlement management for backend callers (billing webhooks, support tools)
entitlements_router = APIRouter(prefix="/profiles", tags=["entitlements"])


@entitlements_router.put(
    "/{profile_id}/entitlement",
    response_model=ProfileDetailResponse,
    summary="Set premium entitlement",
    responses={
        200: {"description": "Entitlement updated"},
        403: {"description": "Caller is not a service"},
        404: {"description": "Profile not found"},
    },
)
async def set_entitlement(
    profile_id: str,
    body: EntitlementRequest,
    _: ServiceUser,
    service: ProfileService = Depends(get_profile_service),
    share: ShareService = Depends(get_share_service),
) -> ProfileDetailResponse:
    """Grant or revoke premium. Stored design preferences are never touched."""
    profile = await service.set_entitlement(profile_id, body.is_premium)
    return _detail(profile, share)
