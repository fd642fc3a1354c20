"""Auth API router — registration, login, token refresh, current user."""

from fastapi import APIRouter, Depends

from storefront_engine.auth.guards import GuardContext
from storefront_engine.common.exceptions import StorefrontError
from storefront_engine.common.security import http_error, require_identity
from storefront_engine.identity.provider import Session
from storefront_engine.identity.schemas import (
    LoginRequest,
    ProfileResponse,
    RefreshRequest,
    RegisteredTenant,
    SessionResponse,
    SignUpRequest,
    SignUpResponse,
    UserSummary,
)

router = APIRouter(prefix="/auth", tags=["auth"])


def _get_service():
    from storefront_engine.deps import get_identity_service
    return get_identity_service()


def _get_db():
    from storefront_engine.deps import get_db
    return get_db()


def _session_response(session: Session, message: str = "Login successful") -> SessionResponse:
    return SessionResponse(
        message=message,
        access_token=session.access_token,
        refresh_token=session.refresh_token,
        token_type=session.token_type,
        user=UserSummary(
            id=session.identity.id,
            email=session.identity.email,
            full_name=session.identity.metadata.get("full_name"),
        ),
    )


@router.post("/signup", response_model=SignUpResponse, status_code=201)
async def sign_up(body: SignUpRequest):
    svc = _get_service()
    try:
        reg = await svc.register(
            _get_db(),
            email=body.email,
            password=body.password,
            full_name=body.full_name,
            business_name=body.business_name,
            subdomain=body.subdomain,
            category_id=body.category_id,
        )
    except StorefrontError as e:
        raise http_error(e)
    return SignUpResponse(
        user_id=reg.identity.id,
        email=reg.identity.email,
        tenant=RegisteredTenant(
            id=reg.tenant.id,
            business_name=reg.tenant.business_name,
            subdomain=reg.tenant.subdomain,
            api_key=reg.api_key,
            category_id=reg.tenant.category_id,
        ),
    )


@router.post("/login", response_model=SessionResponse)
async def login(body: LoginRequest):
    try:
        session = await _get_service().login(body.email, body.password)
    except StorefrontError as e:
        raise http_error(e)
    return _session_response(session)


@router.post("/refresh", response_model=SessionResponse)
async def refresh(body: RefreshRequest):
    try:
        session = await _get_service().refresh(body.refresh_token)
    except StorefrontError as e:
        raise http_error(e)
    return _session_response(session, message="Token refreshed")


@router.get("/me", response_model=ProfileResponse)
async def me(ctx: GuardContext = Depends(require_identity)):
    svc = _get_service()
    db = _get_db()
    try:
        async with db.store() as store:
            profile = await svc.get_profile(store, ctx.identity.id)
            return ProfileResponse.model_validate(profile)
    except StorefrontError as e:
        raise http_error(e)
