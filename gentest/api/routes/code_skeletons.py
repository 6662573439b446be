from fastapi import APIRouter, Depends

from gentest.core.dependencies import get_access_service, get_code_skeleton_service
from gentest.models.schemas import CodeSkeleton
from gentest.services.access_service import AccessService
from gentest.services.code_skeleton_service import CodeSkeletonService

router = APIRouter(prefix="/code-skeletons", tags=["code-skeletons"])


@router.get("/{skeleton_id}", response_model=CodeSkeleton)
async def get_code_skeleton(
    skeleton_id: str,
    access: AccessService = Depends(get_access_service)
):
    return await access.code_skeleton(skeleton_id)


@router.delete("/{skeleton_id}")
async def delete_code_skeleton(
    skeleton_id: str,
    access: AccessService = Depends(get_access_service),
    service: CodeSkeletonService = Depends(get_code_skeleton_service)
):
    await access.code_skeleton(skeleton_id)
    await service.delete_skeleton(skeleton_id)
    return {"message": "Esqueleto excluído com sucesso"}
