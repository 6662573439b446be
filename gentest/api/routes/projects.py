from typing import List
from fastapi import APIRouter, Depends, status
import structlog

from gentest.core.dependencies import get_access_service, get_project_service, get_use_case_service
from gentest.core.exceptions import GenerationError
from gentest.models.schemas import (
    Project, ProjectCreate, ProjectUpdate,
    UseCase, UseCaseCreate, UseCaseWithTestCases
)
from gentest.services.access_service import AccessService
from gentest.services.project_service import ProjectService
from gentest.services.use_case_service import UseCaseService

logger = structlog.get_logger()

router = APIRouter(prefix="/projects", tags=["projects"])


@router.get("/", response_model=List[Project])
async def get_projects(service: ProjectService = Depends(get_project_service)):
    """Projects of the signed-in user, newest first"""
    return await service.get_projects()


@router.post("/", response_model=Project, status_code=status.HTTP_201_CREATED)
async def create_project(
    request: ProjectCreate,
    service: ProjectService = Depends(get_project_service)
):
    """Create a project owned by the signed-in user"""
    return await service.create_project(request.name, request.description)


@router.get("/{project_id}", response_model=Project)
async def get_project(
    project_id: str,
    access: AccessService = Depends(get_access_service)
):
    """Get a project by ID"""
    return await access.project(project_id)


@router.put("/{project_id}", response_model=Project)
async def update_project(
    project_id: str,
    update_data: ProjectUpdate,
    access: AccessService = Depends(get_access_service),
    service: ProjectService = Depends(get_project_service)
):
    """Update name and/or description of a project"""
    await access.project(project_id)
    return await service.update_project(project_id, update_data)


@router.delete("/{project_id}")
async def delete_project(
    project_id: str,
    access: AccessService = Depends(get_access_service),
    service: ProjectService = Depends(get_project_service)
):
    """Delete a project; its use cases, test cases and skeletons go with it"""
    await access.project(project_id)
    await service.delete_project(project_id)
    return {"message": "Projeto excluído com sucesso"}


@router.get("/{project_id}/use-cases", response_model=List[UseCase])
async def get_use_cases(
    project_id: str,
    access: AccessService = Depends(get_access_service),
    service: UseCaseService = Depends(get_use_case_service)
):
    """Use cases of a project, newest first"""
    await access.project(project_id)
    return await service.get_use_cases(project_id)


@router.post("/{project_id}/use-cases", response_model=UseCaseWithTestCases, status_code=status.HTTP_201_CREATED)
async def create_use_case(
    project_id: str,
    request: UseCaseCreate,
    access: AccessService = Depends(get_access_service),
    service: UseCaseService = Depends(get_use_case_service)
):
    """Create a use case and generate its test cases with AI"""
    await access.project(project_id)
    try:
        logger.info("Creating use case", project_id=project_id, name=request.name[:100])
        return await service.create_use_case_with_test_cases(request, project_id)
    except GenerationError as e:
        logger.error("Failed to generate test cases for new use case", project_id=project_id, error=e.message)
        raise
