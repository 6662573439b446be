import structlog

from gentest.core.backend import BackendClient
from gentest.core.exceptions import NotFoundError
from gentest.models.mappings import CODE_SKELETONS, PROJECTS, TEST_CASES, USE_CASES
from gentest.models.schemas import CodeSkeleton, Project, TestCase, UseCase

logger = structlog.get_logger()


class AccessService:
    """Resolves a record only when it belongs to the signed-in user.

    Ownership is inherited down the tree: a skeleton belongs to whoever owns
    the project of its test case's use case. Records owned by someone else
    are reported as missing.
    """

    def __init__(self, backend: BackendClient):
        self.rows = backend.rows
        self.user = backend.require_user()

    async def project(self, project_id: str) -> Project:
        row = await self.rows.select_one(PROJECTS.table, {"id": project_id})
        if row is None or row["user_id"] != self.user.id:
            if row is not None:
                logger.warning("Project access denied", project_id=project_id, user_id=self.user.id)
            raise NotFoundError("Projeto não encontrado.")
        return PROJECTS.from_row(row)

    async def use_case(self, use_case_id: str) -> UseCase:
        row = await self.rows.select_one(USE_CASES.table, {"id": use_case_id})
        if row is None:
            raise NotFoundError("Caso de uso não encontrado.")
        try:
            await self.project(row["project_id"])
        except NotFoundError:
            raise NotFoundError("Caso de uso não encontrado.")
        return USE_CASES.from_row(row)

    async def test_case(self, test_case_id: str) -> TestCase:
        row = await self.rows.select_one(TEST_CASES.table, {"id": test_case_id})
        if row is None:
            raise NotFoundError("Caso de teste não encontrado.")
        try:
            await self.use_case(row["use_case_id"])
        except NotFoundError:
            raise NotFoundError("Caso de teste não encontrado.")
        return TEST_CASES.from_row(row)

    async def code_skeleton(self, skeleton_id: str) -> CodeSkeleton:
        row = await self.rows.select_one(CODE_SKELETONS.table, {"id": skeleton_id})
        if row is None:
            raise NotFoundError("Esqueleto de código não encontrado.")
        try:
            await self.test_case(row["test_case_id"])
        except NotFoundError:
            raise NotFoundError("Esqueleto de código não encontrado.")
        return CODE_SKELETONS.from_row(row)
