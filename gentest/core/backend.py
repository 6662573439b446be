from typing import Optional

from gentest.core.exceptions import NotAuthenticatedError
from gentest.core.functions_client import FunctionsClient
from gentest.models.schemas import User
from gentest.repositories.interfaces.row_store import IRowStore


class BackendClient:
    """Single configured handle to the backend: row storage, the signed-in user
    and generation-function invocation."""

    def __init__(self, rows: IRowStore, functions: FunctionsClient, user: Optional[User] = None):
        self.rows = rows
        self.functions = functions
        self._user = user

    def get_user(self) -> Optional[User]:
        return self._user

    def require_user(self) -> User:
        if self._user is None:
            raise NotAuthenticatedError("Usuário não autenticado.")
        return self._user
