from typing import Optional

import structlog

from gentest.core.exceptions import AuthError, BackendError
from gentest.core.security import create_access_token, decode_access_token, hash_password, verify_password
from gentest.models.mappings import USERS
from gentest.models.schemas import AuthSession, User
from gentest.repositories.interfaces.row_store import IRowStore

logger = structlog.get_logger()


class AuthService:
    """Sign-up, sign-in and token resolution over the users table"""

    def __init__(self, rows: IRowStore):
        self.rows = rows

    async def sign_up(self, name: str, email: str, password: str) -> User:
        email = email.strip().lower()
        existing = await self.rows.select_one(USERS.table, {"email": email})
        if existing is not None:
            raise AuthError("E-mail já cadastrado.")

        payload = USERS.to_insert_row(
            {"name": name, "email": email, "password_hash": hash_password(password)}
        )
        try:
            rows = await self.rows.insert(USERS.table, payload)
        except BackendError as e:
            logger.error("Sign-up failed", email=email, error=e.message)
            raise AuthError("Não foi possível concluir o cadastro.")

        logger.info("User signed up", user_id=rows[0]["id"])
        return USERS.from_row(rows[0])

    async def sign_in(self, email: str, password: str) -> AuthSession:
        row = await self.rows.select_one(USERS.table, {"email": email.strip().lower()})
        if row is None or not verify_password(password, row["password_hash"]):
            raise AuthError("Credenciais de login inválidas.", status_code=401)

        user = USERS.from_row(row)
        logger.info("User signed in", user_id=user.id)
        return AuthSession(access_token=create_access_token(user.id), user=user)

    async def get_user(self, token: str) -> Optional[User]:
        user_id = decode_access_token(token)
        if not user_id:
            return None
        row = await self.rows.select_one(USERS.table, {"id": user_id})
        return USERS.from_row(row) if row is not None else None
