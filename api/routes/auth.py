"""
Session endpoints.

``/me`` tells a client which route tree to use: superadmins get the
superadmin console, everyone else the trainer console.
"""

from fastapi import APIRouter, Depends

from modules.auth.models import SessionInfo, SignUpRequest, SignUpResult
from modules.auth.profiles import ProfileService
from modules.auth.session import SessionHolder

from ..dependencies import RequestContext, get_container, get_request_context

router = APIRouter()


@router.get("/me", response_model=SessionInfo)
async def get_session_info(ctx: RequestContext = Depends(get_request_context)) -> SessionInfo:
    """
    The caller's principal, resolved profile and classification.

    Requires authentication.
    """
    return SessionInfo(
        user=ctx.principal,
        profile=ctx.profile,
        is_superadmin=ctx.is_superadmin,
        tenant_ready=ctx.resolver.ready,
        tenant_schema=ctx.resolver.schema_name,
        tenant_mode=ctx.resolver.mode.value if ctx.resolver.mode else None,
    )


@router.post("/sign-up", response_model=SignUpResult, status_code=201)
async def sign_up(request: SignUpRequest) -> SignUpResult:
    """
    Register a trainer: account, trainer row with a trial, tenant schema.

    Steps that completed are kept when a later one fails; failures are
    listed in ``errors``.
    """
    container = get_container()
    holder = SessionHolder(
        container.client,
        ProfileService(container.lookup_client, container.settings),
        container.settings,
        provisioner=container.provisioner,
    )
    return await holder.sign_up(request.email, request.password, request.full_name)
