from fastapi import APIRouter, Depends, status
import structlog

from gentest.core.dependencies import get_auth_service, require_user
from gentest.models.schemas import AuthSession, SignInRequest, SignUpRequest, User
from gentest.services.auth_service import AuthService

logger = structlog.get_logger()

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=User, status_code=status.HTTP_201_CREATED)
async def register(
    request: SignUpRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Create an account"""
    return await service.sign_up(request.name, request.email, request.password)


@router.post("/login", response_model=AuthSession)
async def login(
    request: SignInRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Exchange e-mail and password for an access token"""
    return await service.sign_in(request.email, request.password)


@router.get("/me", response_model=User)
async def me(user: User = Depends(require_user)):
    """Current user"""
    return user
