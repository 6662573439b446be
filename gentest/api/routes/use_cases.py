from typing import List
from fastapi import APIRouter, Depends
import structlog

from gentest.core.dependencies import get_access_service, get_test_case_service, get_use_case_service
from gentest.core.exceptions import GenerationError
from gentest.models.schemas import TestCase, UseCase, UseCaseUpdate
from gentest.services.access_service import AccessService
from gentest.services.test_case_service import TestCaseService
from gentest.services.use_case_service import UseCaseService

logger = structlog.get_logger()

router = APIRouter(prefix="/use-cases", tags=["use-cases"])


@router.get("/{use_case_id}", response_model=UseCase)
async def get_use_case(
    use_case_id: str,
    access: AccessService = Depends(get_access_service)
):
    """Get a use case by ID"""
    return await access.use_case(use_case_id)


@router.put("/{use_case_id}", response_model=UseCase)
async def update_use_case(
    use_case_id: str,
    update_data: UseCaseUpdate,
    access: AccessService = Depends(get_access_service),
    service: UseCaseService = Depends(get_use_case_service)
):
    """Update an existing use case"""
    await access.use_case(use_case_id)
    return await service.update_use_case(use_case_id, update_data)


@router.delete("/{use_case_id}")
async def delete_use_case(
    use_case_id: str,
    access: AccessService = Depends(get_access_service),
    service: UseCaseService = Depends(get_use_case_service)
):
    """Delete a use case and, through the database, its test cases"""
    await access.use_case(use_case_id)
    await service.delete_use_case(use_case_id)
    return {"message": "Caso de uso excluído com sucesso"}


@router.get("/{use_case_id}/test-cases", response_model=List[TestCase])
async def get_test_cases(
    use_case_id: str,
    access: AccessService = Depends(get_access_service),
    service: TestCaseService = Depends(get_test_case_service)
):
    """Test cases of a use case, newest first"""
    await access.use_case(use_case_id)
    return await service.get_test_cases(use_case_id)


@router.post("/{use_case_id}/test-cases/regenerate", response_model=List[TestCase])
async def regenerate_test_cases(
    use_case_id: str,
    access: AccessService = Depends(get_access_service),
    service: UseCaseService = Depends(get_use_case_service)
):
    """Replace the test cases of a use case with newly generated ones"""
    await access.use_case(use_case_id)
    try:
        logger.info("Regenerating test cases", use_case_id=use_case_id)
        return await service.regenerate_test_cases(use_case_id)
    except GenerationError as e:
        logger.error("Failed to regenerate test cases", use_case_id=use_case_id, error=e.message)
        raise
