from typing import List

import structlog

from gentest.core.backend import BackendClient
from gentest.core.exceptions import GenerationError, NotFoundError
from gentest.models.mappings import DomainInput, USE_CASES
from gentest.models.schemas import TestCase, UseCase, UseCaseCreate, UseCaseWithTestCases
from gentest.services.ai_generation_service import (
    AIGenerationService,
    INVALID_TEST_CASES_MESSAGE,
    TEST_CASES_ERROR_PREFIX,
)
from gentest.services.test_case_service import TestCaseService

logger = structlog.get_logger()


class UseCaseService:
    """CRUD over the use_cases table plus the test-generation workflows"""

    def __init__(
        self,
        backend: BackendClient,
        ai_generation_service: AIGenerationService,
        test_case_service: TestCaseService,
    ):
        self.rows = backend.rows
        self.ai_generation_service = ai_generation_service
        self.test_case_service = test_case_service

    async def get_use_cases(self, project_id: str) -> List[UseCase]:
        rows = await self.rows.select(
            USE_CASES.table, filters={"project_id": project_id}, order_by="created_at", descending=True
        )
        return [USE_CASES.from_row(row) for row in rows]

    async def get_use_case_by_id(self, use_case_id: str) -> UseCase:
        row = await self.rows.select_one(USE_CASES.table, {"id": use_case_id})
        if row is None:
            raise NotFoundError("Caso de uso não encontrado.")
        return USE_CASES.from_row(row)

    async def create_use_case(self, data: DomainInput, project_id: str) -> UseCase:
        if not isinstance(data, UseCaseCreate):
            # fills optional fields, so every insert column is sent
            data = UseCaseCreate.model_validate(data)
        payload = USE_CASES.to_insert_row(data, project_id=project_id)
        rows = await self.rows.insert(USE_CASES.table, payload)
        logger.info("Use case created", use_case_id=rows[0]["id"], project_id=project_id)
        return USE_CASES.from_row(rows[0])

    async def update_use_case(self, use_case_id: str, updates: DomainInput) -> UseCase:
        payload = USE_CASES.to_update_row(updates)
        if not payload:
            return await self.get_use_case_by_id(use_case_id)

        rows = await self.rows.update(USE_CASES.table, payload, {"id": use_case_id})
        if not rows:
            raise NotFoundError("Caso de uso não encontrado.")
        return USE_CASES.from_row(rows[0])

    async def delete_use_case(self, use_case_id: str) -> bool:
        await self.rows.delete(USE_CASES.table, {"id": use_case_id})
        logger.info("Use case deleted", use_case_id=use_case_id)
        return True

    async def create_use_case_with_test_cases(self, data: DomainInput, project_id: str) -> UseCaseWithTestCases:
        """Create a use case, generate its test cases and save them.

        Steps run in order without compensation: when generation fails the
        use case stays created with no test cases and the error propagates.
        """
        use_case = await self.create_use_case(data, project_id)
        try:
            generated = await self.ai_generation_service.generate_test_cases(use_case)
            test_cases = await self.test_case_service.create_test_cases(generated, use_case.id)
        except Exception as e:
            logger.error("Use case created but test case generation failed", use_case_id=use_case.id, error=str(e))
            raise
        return UseCaseWithTestCases(use_case=use_case, test_cases=test_cases)

    async def regenerate_test_cases(self, use_case_id: str) -> List[TestCase]:
        """Replace a use case's test cases with freshly generated ones.

        Generation runs before anything is deleted and the swap is a single
        transaction, so a failure keeps the previous test cases.
        """
        use_case = await self.get_use_case_by_id(use_case_id)
        generated = await self.ai_generation_service.generate_test_cases(use_case)
        if not generated:
            logger.error("Regeneration returned no test cases; keeping the current ones", use_case_id=use_case.id)
            raise GenerationError(TEST_CASES_ERROR_PREFIX + INVALID_TEST_CASES_MESSAGE)
        return await self.test_case_service.replace_test_cases(generated, use_case.id)
