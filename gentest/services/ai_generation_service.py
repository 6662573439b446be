from typing import Any, Dict, List, Union

import structlog
from pydantic import ValidationError

from gentest.core.backend import BackendClient
from gentest.core.exceptions import GenerationError
from gentest.models.schemas import GeneratedTestCase, SkeletonFramework, TestCase, UseCase

logger = structlog.get_logger()

TEST_CASES_FUNCTION = "generate-test-cases"
CODE_SKELETON_FUNCTION = "generate-code-skeleton"

TEST_CASES_ERROR_PREFIX = "Erro na IA (Test Cases): "
CODE_SKELETON_ERROR_PREFIX = "Erro na IA (Code Skeleton): "
INVALID_TEST_CASES_MESSAGE = "A IA não retornou casos de teste válidos."
INVALID_CODE_MESSAGE = "A IA não retornou um código válido."


def build_test_cases_payload(use_case: UseCase) -> Dict[str, Any]:
    """Reshape a use case into the body expected by the test-case generation function."""
    return {
        "useCase": {
            "name": use_case.name,
            "actor": use_case.actor,
            "preConditions": use_case.preconditions,
            "mainFlow": use_case.main_flow,
            "alternativeFlows": use_case.alternative_flows,
        }
    }


def build_code_skeleton_payload(test_case: TestCase, framework: Union[SkeletonFramework, str]) -> Dict[str, Any]:
    return {
        "testCase": test_case.model_dump(by_alias=True, mode="json"),
        "framework": SkeletonFramework(framework).value,
    }


class AIGenerationService:
    """Client side of the generation functions"""

    def __init__(self, backend: BackendClient):
        self.backend = backend

    async def generate_test_cases(self, use_case: UseCase) -> List[GeneratedTestCase]:
        response = await self.backend.functions.invoke(TEST_CASES_FUNCTION, build_test_cases_payload(use_case))

        if response.error:
            raise GenerationError(TEST_CASES_ERROR_PREFIX + response.error.message)

        data = response.data
        if not isinstance(data, list):
            logger.error("Test case generation returned a non-list payload", use_case_id=use_case.id, payload=str(data)[:200])
            raise GenerationError(TEST_CASES_ERROR_PREFIX + INVALID_TEST_CASES_MESSAGE)

        try:
            generated = [GeneratedTestCase.model_validate(item) for item in data]
        except ValidationError as e:
            logger.error("Generated test cases failed validation", use_case_id=use_case.id, error=str(e))
            raise GenerationError(TEST_CASES_ERROR_PREFIX + INVALID_TEST_CASES_MESSAGE)

        logger.info("Test cases generated", use_case_id=use_case.id, count=len(generated))
        return generated

    async def generate_code_skeleton(self, test_case: TestCase, framework: Union[SkeletonFramework, str]) -> str:
        response = await self.backend.functions.invoke(
            CODE_SKELETON_FUNCTION, build_code_skeleton_payload(test_case, framework)
        )

        if response.error:
            raise GenerationError(CODE_SKELETON_ERROR_PREFIX + response.error.message)

        data = response.data
        code = data.get("code") if isinstance(data, dict) else None
        if not isinstance(code, str) or not code:
            raise GenerationError(INVALID_CODE_MESSAGE)

        return code
