from typing import List, Union

import structlog

from gentest.core.backend import BackendClient
from gentest.core.exceptions import BackendError, NotFoundError
from gentest.models.mappings import CODE_SKELETONS
from gentest.models.schemas import CodeSkeleton, SkeletonFramework, TestCase
from gentest.services.ai_generation_service import AIGenerationService

logger = structlog.get_logger()


class CodeSkeletonService:
    """Generated code skeletons of a test case"""

    def __init__(self, backend: BackendClient, ai_generation_service: AIGenerationService):
        self.rows = backend.rows
        self.ai_generation_service = ai_generation_service

    async def get_skeletons_by_test_case_id(self, test_case_id: str) -> List[CodeSkeleton]:
        rows = await self.rows.select(
            CODE_SKELETONS.table, filters={"test_case_id": test_case_id}, order_by="created_at", descending=True
        )
        return [CODE_SKELETONS.from_row(row) for row in rows]

    async def get_skeleton_by_id(self, skeleton_id: str) -> CodeSkeleton:
        row = await self.rows.select_one(CODE_SKELETONS.table, {"id": skeleton_id})
        if row is None:
            raise NotFoundError("Esqueleto de código não encontrado.")
        return CODE_SKELETONS.from_row(row)

    async def generate_skeleton(self, test_case: TestCase, framework: Union[SkeletonFramework, str]) -> CodeSkeleton:
        """Generate code for a test case and store it; nothing is stored if generation fails"""
        code = await self.ai_generation_service.generate_code_skeleton(test_case, framework)

        payload = CODE_SKELETONS.to_insert_row(
            {
                "test_case_id": test_case.id,
                "framework": SkeletonFramework(framework).value,
                "generated_code": code,
            }
        )
        try:
            rows = await self.rows.insert(CODE_SKELETONS.table, payload)
        except BackendError as e:
            raise BackendError("Erro ao salvar esqueleto: " + e.message)

        logger.info("Code skeleton saved", skeleton_id=rows[0]["id"], test_case_id=test_case.id)
        return CODE_SKELETONS.from_row(rows[0])

    async def delete_skeleton(self, skeleton_id: str) -> bool:
        await self.rows.delete(CODE_SKELETONS.table, {"id": skeleton_id})
        return True
