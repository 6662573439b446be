"""Declarative row <-> domain mappings, one per entity.

Rows are snake_case dicts as stored by the row store. Domain objects are the
pydantic models in ``schemas``; their camelCase wire names come from the
models' alias generator, so callers may hand in either a model, a snake_case
dict or a camelCase dict.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Tuple, Type, Union

from pydantic import BaseModel

from gentest.models.schemas import CodeSkeleton, Project, TestCase, UseCase, User

DomainInput = Union[BaseModel, Mapping[str, Any]]


@dataclass(frozen=True)
class EntityMapping:
    table: str
    model: Type[BaseModel]
    insert_columns: Tuple[str, ...]
    update_columns: Tuple[str, ...]
    _columns_by_alias: Dict[str, str] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        by_alias = {}
        for name, info in self.model.model_fields.items():
            by_alias[name] = name
            if info.alias:
                by_alias[info.alias] = name
        for column in self.insert_columns:
            by_alias.setdefault(column, column)
        object.__setattr__(self, "_columns_by_alias", by_alias)

    def from_row(self, row: Mapping[str, Any]) -> BaseModel:
        return self.model.model_validate(dict(row))

    def to_insert_row(self, data: DomainInput, **extra: Any) -> Dict[str, Any]:
        return self._project(data, self.insert_columns, extra, partial=False)

    def to_update_row(self, data: DomainInput) -> Dict[str, Any]:
        return self._project(data, self.update_columns, {}, partial=True)

    def _project(
        self, data: DomainInput, columns: Tuple[str, ...], extra: Mapping[str, Any], partial: bool
    ) -> Dict[str, Any]:
        values = self._as_snake(data, partial)
        values.update(extra)
        return {column: values[column] for column in columns if values.get(column) is not None}

    def _as_snake(self, data: DomainInput, partial: bool) -> Dict[str, Any]:
        if isinstance(data, BaseModel):
            # unset fields of partial updates must not reach the row
            raw = data.model_dump(exclude_unset=partial, mode="json")
        else:
            raw = dict(data)
        return {self._columns_by_alias.get(key, key): value for key, value in raw.items()}


USERS = EntityMapping(
    table="users",
    model=User,
    insert_columns=("name", "email", "password_hash"),
    update_columns=("name",),
)

PROJECTS = EntityMapping(
    table="projects",
    model=Project,
    insert_columns=("name", "description", "user_id"),
    update_columns=("name", "description"),
)

USE_CASES = EntityMapping(
    table="use_cases",
    model=UseCase,
    insert_columns=("name", "description", "actor", "preconditions", "main_flow", "alternative_flows", "project_id"),
    update_columns=("name", "description", "actor", "preconditions", "main_flow", "alternative_flows"),
)

TEST_CASES = EntityMapping(
    table="test_cases",
    model=TestCase,
    insert_columns=("title", "description", "type", "precondition", "steps", "expected_result", "use_case_id"),
    update_columns=("title", "description", "type", "precondition", "steps", "expected_result"),
)

CODE_SKELETONS = EntityMapping(
    table="code_skeletons",
    model=CodeSkeleton,
    insert_columns=("test_case_id", "framework", "generated_code"),
    update_columns=(),
)
