"""
Profile settings API endpoints.
"""

from fastapi import APIRouter, Depends, File, UploadFile

from api.dependencies import RequestContext, get_profile_settings_service, get_request_context
from modules.catalog.models import StoredFile

from .models import ProfileUpdate, ProfileUpdateResult
from .service import ProfileSettingsService

router = APIRouter()


@router.patch("", response_model=ProfileUpdateResult)
async def update_profile(
    request: ProfileUpdate,
    ctx: RequestContext = Depends(get_request_context),
    service: ProfileSettingsService = Depends(get_profile_settings_service),
) -> ProfileUpdateResult:
    """Update the caller's own profile (superadmins and trainers)."""
    return await service.update_profile(ctx.principal, ctx.profile, request)


@router.post("/avatar", response_model=StoredFile, status_code=201)
async def upload_avatar(
    file: UploadFile = File(...),
    ctx: RequestContext = Depends(get_request_context),
    service: ProfileSettingsService = Depends(get_profile_settings_service),
) -> StoredFile:
    """Upload an avatar (5MB max). Save the returned URL with a profile update."""
    content = await file.read()
    return await service.upload_avatar(ctx.principal, file.filename or "avatar", content, file.content_type)
