from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import List, Optional, Any
from datetime import datetime
from enum import Enum


class CamelModel(BaseModel):
    """Domain models use snake_case attributes and speak camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class SkeletonFramework(str, Enum):
    JAVASCRIPT_CYPRESS = "JavaScript + Cypress"
    PYTHON_PLAYWRIGHT = "Python + Playwright"


class TestCaseType(str, Enum):
    HAPPY_PATH = "Caminho Feliz"
    ALTERNATIVE_PATH = "Caminho Alternativo"
    EXCEPTION_PATH = "Caminho de Exceção"


# --- Users / auth ---

class User(CamelModel):
    id: str
    name: str
    email: str
    created_at: Optional[datetime] = None


class SignUpRequest(CamelModel):
    name: str = Field(..., min_length=1, description="Display name")
    email: str = Field(..., min_length=3, description="Login e-mail")
    password: str = Field(..., min_length=6, description="Plain password, hashed before storage")

    @field_validator("password")
    @classmethod
    def _fits_bcrypt(cls, value: str) -> str:
        # bcrypt only hashes the first 72 bytes and rejects longer input
        if len(value.encode("utf-8")) > 72:
            raise ValueError("A senha deve ter no máximo 72 bytes.")
        return value


class SignInRequest(CamelModel):
    email: str
    password: str


class AuthSession(CamelModel):
    access_token: str
    token_type: str = "bearer"
    user: User


# --- Projects ---

class ProjectBase(CamelModel):
    name: str = Field(..., min_length=1, description="Project name")
    description: str = Field(default="", description="Free-text project description")


class ProjectCreate(ProjectBase):
    pass


class ProjectUpdate(CamelModel):
    name: Optional[str] = None
    description: Optional[str] = None


class Project(ProjectBase):
    id: str
    user_id: str
    created_at: Optional[datetime] = None

    @field_validator("id", "user_id", mode="before")
    @classmethod
    def _stringify_ids(cls, value: Any) -> Any:
        return str(value) if value is not None else value


# --- Use cases ---

class UseCaseBase(CamelModel):
    name: str = Field(..., min_length=1, description="Use case name")
    description: str = Field(default="", description="Short description")
    actor: str = Field(..., description="Primary actor")
    preconditions: str = Field(default="", description="Preconditions")
    main_flow: str = Field(..., description="Main success flow")
    alternative_flows: str = Field(default="", description="Alternative and exception flows")


class UseCaseCreate(UseCaseBase):
    pass


class UseCaseUpdate(CamelModel):
    name: Optional[str] = None
    description: Optional[str] = None
    actor: Optional[str] = None
    preconditions: Optional[str] = None
    main_flow: Optional[str] = None
    alternative_flows: Optional[str] = None


class UseCase(UseCaseBase):
    id: str
    project_id: str
    created_at: Optional[datetime] = None

    @field_validator("id", "project_id", mode="before")
    @classmethod
    def _stringify_ids(cls, value: Any) -> Any:
        return str(value) if value is not None else value


# --- Test cases ---

class TestCaseBase(CamelModel):
    title: str = Field(..., description="Short scenario title")
    description: str = Field(default="", description="Goal of the scenario")
    type: str = Field(..., description="Category label, e.g. Caminho Feliz")
    precondition: str = Field(default="", description="Precondition for execution")
    steps: str = Field(..., description="Steps to execute")
    expected_result: str = Field(..., description="Expected outcome")


class TestCaseUpdate(CamelModel):
    title: Optional[str] = None
    description: Optional[str] = None
    type: Optional[str] = None
    precondition: Optional[str] = None
    steps: Optional[str] = None
    expected_result: Optional[str] = None


class TestCase(TestCaseBase):
    id: str
    use_case_id: str
    created_at: Optional[datetime] = None

    @field_validator("id", "use_case_id", mode="before")
    @classmethod
    def _stringify_ids(cls, value: Any) -> Any:
        return str(value) if value is not None else value


class GeneratedTestCase(BaseModel):
    """Test case as returned by the generation function (snake_case keys)."""

    title: str = ""
    description: str = ""
    type: str = ""
    precondition: str = ""
    steps: str = ""
    expected_result: str = ""

    @field_validator("title", "description", "type", "precondition", "steps", "expected_result", mode="before")
    @classmethod
    def _normalize(cls, value: Any) -> Any:
        if value is None:
            return ""
        if isinstance(value, list):
            return "\n".join(str(item) for item in value)
        return value


# --- Code skeletons ---

class CodeSkeleton(CamelModel):
    id: str
    test_case_id: str
    framework: str
    generated_code: str
    created_at: Optional[datetime] = None

    @field_validator("id", "test_case_id", mode="before")
    @classmethod
    def _stringify_ids(cls, value: Any) -> Any:
        return str(value) if value is not None else value


class GenerateSkeletonRequest(CamelModel):
    framework: SkeletonFramework = Field(default=SkeletonFramework.JAVASCRIPT_CYPRESS)


# --- Workflow responses ---

class UseCaseWithTestCases(CamelModel):
    use_case: UseCase
    test_cases: List[TestCase] = Field(default_factory=list)
