from functools import lru_cache
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from gentest.config.settings import settings
from gentest.core.backend import BackendClient
from gentest.core.database import get_database
from gentest.core.exceptions import NotAuthenticatedError
from gentest.core.functions_client import FunctionsClient
from gentest.core.security import decode_access_token
from gentest.models.schemas import User
from gentest.repositories.implementations.gemini_service import GeminiService
from gentest.repositories.implementations.sql_row_store import SQLRowStore
from gentest.repositories.interfaces.ai_service import IAIService
from gentest.repositories.interfaces.row_store import IRowStore
from gentest.services.access_service import AccessService
from gentest.services.ai_generation_service import AIGenerationService
from gentest.services.auth_service import AuthService
from gentest.services.code_skeleton_service import CodeSkeletonService
from gentest.services.project_service import ProjectService
from gentest.services.test_case_service import TestCaseService
from gentest.services.use_case_service import UseCaseService

bearer_scheme = HTTPBearer(auto_error=False)


class Container:
    """Dependency injection container"""

    def __init__(self):
        self._ai_service = None
        self._functions_client = None

    def row_store(self, db: Session) -> IRowStore:
        """Get row store instance bound to a request session"""
        return SQLRowStore(db)

    @lru_cache()
    def ai_service(self) -> IAIService:
        """Get AI service instance (singleton)"""
        if self._ai_service is None:
            self._ai_service = GeminiService()
        return self._ai_service

    @lru_cache()
    def functions_client(self) -> FunctionsClient:
        """Get generation functions client (singleton)"""
        if self._functions_client is None:
            self._functions_client = FunctionsClient(
                base_url=settings.functions_base_url,
                timeout=settings.functions_timeout_seconds,
            )
        return self._functions_client

    def backend(self, rows: IRowStore, functions: FunctionsClient, user: Optional[User]) -> BackendClient:
        return BackendClient(rows=rows, functions=functions, user=user)


# Global container instance
container = Container()


# Dependency providers for FastAPI
def get_row_store(db: Session = Depends(get_database)) -> IRowStore:
    """FastAPI dependency for the row store"""
    return container.row_store(db)


def get_ai_service() -> IAIService:
    """FastAPI dependency for AI service"""
    return container.ai_service()


def get_functions_client() -> FunctionsClient:
    """FastAPI dependency for the generation functions client"""
    return container.functions_client()


def get_auth_service(rows: IRowStore = Depends(get_row_store)) -> AuthService:
    return AuthService(rows)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    auth_service: AuthService = Depends(get_auth_service),
) -> Optional[User]:
    """Resolve the bearer token to a user, None when absent or invalid"""
    if credentials is None:
        return None
    return await auth_service.get_user(credentials.credentials)


async def require_user(user: Optional[User] = Depends(get_current_user)) -> User:
    if user is None:
        raise NotAuthenticatedError("Usuário não autenticado.")
    return user


def get_backend(
    rows: IRowStore = Depends(get_row_store),
    functions: FunctionsClient = Depends(get_functions_client),
    user: User = Depends(require_user),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> BackendClient:
    """FastAPI dependency for the backend client of a signed-in request.

    Function invocations carry the caller's bearer token.
    """
    functions = functions.with_headers({"Authorization": f"Bearer {credentials.credentials}"})
    return container.backend(rows, functions, user)


def require_function_caller(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> str:
    """Generation functions accept any holder of a valid access token"""
    user_id = decode_access_token(credentials.credentials) if credentials is not None else None
    if not user_id:
        raise NotAuthenticatedError("Usuário não autenticado.")
    return user_id


def get_ai_generation_service(backend: BackendClient = Depends(get_backend)) -> AIGenerationService:
    return AIGenerationService(backend)


def get_access_service(backend: BackendClient = Depends(get_backend)) -> AccessService:
    """Ownership checks for records addressed by id"""
    return AccessService(backend)


def get_project_service(backend: BackendClient = Depends(get_backend)) -> ProjectService:
    return ProjectService(backend)


def get_test_case_service(backend: BackendClient = Depends(get_backend)) -> TestCaseService:
    return TestCaseService(backend)


def get_use_case_service(
    backend: BackendClient = Depends(get_backend),
    ai_generation_service: AIGenerationService = Depends(get_ai_generation_service),
    test_case_service: TestCaseService = Depends(get_test_case_service),
) -> UseCaseService:
    return UseCaseService(backend, ai_generation_service, test_case_service)


def get_code_skeleton_service(
    backend: BackendClient = Depends(get_backend),
    ai_generation_service: AIGenerationService = Depends(get_ai_generation_service),
) -> CodeSkeletonService:
    return CodeSkeletonService(backend, ai_generation_service)
