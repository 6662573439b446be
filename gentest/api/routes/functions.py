from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response

from gentest.core.dependencies import get_ai_service, require_function_caller
from gentest.functions import generate_code_skeleton, generate_test_cases
from gentest.functions.common import preflight_response
from gentest.repositories.interfaces.ai_service import IAIService

router = APIRouter(prefix="/functions/v1", tags=["functions"])


@router.options("/generate-test-cases", include_in_schema=False)
@router.options("/generate-code-skeleton", include_in_schema=False)
async def preflight() -> Response:
    return preflight_response()


@router.post("/generate-test-cases", dependencies=[Depends(require_function_caller)])
async def generate_test_cases_function(request: Request, ai_service: IAIService = Depends(get_ai_service)):
    """Generate test cases (JSON array) from a use case"""
    return await generate_test_cases.handle(request, ai_service)


@router.post("/generate-code-skeleton", dependencies=[Depends(require_function_caller)])
async def generate_code_skeleton_function(request: Request, ai_service: IAIService = Depends(get_ai_service)):
    """Generate a test script for a test case in the requested framework"""
    return await generate_code_skeleton.handle(request, ai_service)
