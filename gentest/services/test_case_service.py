from typing import List, Sequence

import structlog

from gentest.core.backend import BackendClient
from gentest.core.exceptions import NotFoundError
from gentest.models.mappings import DomainInput, TEST_CASES
from gentest.models.schemas import GeneratedTestCase, TestCase

logger = structlog.get_logger()


class TestCaseService:
    """CRUD over the test_cases table"""

    def __init__(self, backend: BackendClient):
        self.rows = backend.rows

    async def get_test_cases(self, use_case_id: str) -> List[TestCase]:
        rows = await self.rows.select(
            TEST_CASES.table, filters={"use_case_id": use_case_id}, order_by="created_at", descending=True
        )
        return [TEST_CASES.from_row(row) for row in rows]

    async def get_test_case_by_id(self, test_case_id: str) -> TestCase:
        row = await self.rows.select_one(TEST_CASES.table, {"id": test_case_id})
        if row is None:
            raise NotFoundError("Caso de teste não encontrado.")
        return TEST_CASES.from_row(row)

    async def create_test_cases(self, tests: Sequence[GeneratedTestCase], use_case_id: str) -> List[TestCase]:
        """Persist generated test cases under a use case in a single insert"""
        if not tests:
            return []
        payload = [TEST_CASES.to_insert_row(test, use_case_id=use_case_id) for test in tests]
        rows = await self.rows.insert(TEST_CASES.table, payload)
        logger.info("Test cases saved", use_case_id=use_case_id, count=len(rows))
        return [TEST_CASES.from_row(row) for row in rows]

    async def replace_test_cases(self, tests: Sequence[GeneratedTestCase], use_case_id: str) -> List[TestCase]:
        """Swap every test case of a use case for ``tests`` atomically"""
        payload = [TEST_CASES.to_insert_row(test, use_case_id=use_case_id) for test in tests]
        rows = await self.rows.replace(TEST_CASES.table, {"use_case_id": use_case_id}, payload)
        logger.info("Test cases replaced", use_case_id=use_case_id, count=len(rows))
        return [TEST_CASES.from_row(row) for row in rows]

    async def update_test_case(self, test_case_id: str, updates: DomainInput) -> TestCase:
        payload = TEST_CASES.to_update_row(updates)
        if not payload:
            return await self.get_test_case_by_id(test_case_id)

        rows = await self.rows.update(TEST_CASES.table, payload, {"id": test_case_id})
        if not rows:
            raise NotFoundError("Caso de teste não encontrado.")
        return TEST_CASES.from_row(rows[0])

    async def delete_test_case_by_id(self, test_case_id: str) -> bool:
        await self.rows.delete(TEST_CASES.table, {"id": test_case_id})
        return True
