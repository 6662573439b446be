import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, String, Text, DateTime, ForeignKey
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def _new_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UserModel(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}')>"


class ProjectModel(Base):
    __tablename__ = "projects"

    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    def __repr__(self):
        return f"<Project(id={self.id}, name='{self.name}')>"


class UseCaseModel(Base):
    __tablename__ = "use_cases"

    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    actor = Column(String(255), nullable=False)
    preconditions = Column(Text, nullable=False, default="")
    main_flow = Column(Text, nullable=False)
    alternative_flows = Column(Text, nullable=False, default="")
    project_id = Column(String(36), ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    def __repr__(self):
        return f"<UseCase(id={self.id}, name='{self.name}')>"


class TestCaseModel(Base):
    __tablename__ = "test_cases"

    id = Column(String(36), primary_key=True, default=_new_id)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    type = Column(String(100), nullable=False)
    precondition = Column(Text, nullable=False, default="")
    steps = Column(Text, nullable=False)
    expected_result = Column(Text, nullable=False)
    use_case_id = Column(String(36), ForeignKey("use_cases.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    def __repr__(self):
        return f"<TestCase(id={self.id}, title='{self.title}', type='{self.type}')>"


class CodeSkeletonModel(Base):
    __tablename__ = "code_skeletons"

    id = Column(String(36), primary_key=True, default=_new_id)
    test_case_id = Column(String(36), ForeignKey("test_cases.id", ondelete="CASCADE"), nullable=False, index=True)
    framework = Column(String(100), nullable=False)
    generated_code = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    def __repr__(self):
        return f"<CodeSkeleton(id={self.id}, framework='{self.framework}')>"
