from fastapi import APIRouter
from gentest.api.routes import auth, code_skeletons, health, projects, test_cases, use_cases

api_router = APIRouter()

# Include all route modules
api_router.include_router(health.router)
api_router.include_router(auth.router)
api_router.include_router(projects.router)
api_router.include_router(use_cases.router)
api_router.include_router(test_cases.router)
api_router.include_router(code_skeletons.router)
