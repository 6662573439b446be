from typing import List

import structlog

from gentest.core.backend import BackendClient
from gentest.core.exceptions import NotFoundError
from gentest.models.mappings import DomainInput, PROJECTS
from gentest.models.schemas import Project

logger = structlog.get_logger()


class ProjectService:
    """CRUD over the projects table"""

    def __init__(self, backend: BackendClient):
        self.backend = backend
        self.rows = backend.rows

    async def get_projects(self) -> List[Project]:
        """Projects owned by the signed-in user, newest first"""
        user = self.backend.require_user()
        rows = await self.rows.select(
            PROJECTS.table, filters={"user_id": user.id}, order_by="created_at", descending=True
        )
        return [PROJECTS.from_row(row) for row in rows]

    async def get_project_by_id(self, project_id: str) -> Project:
        row = await self.rows.select_one(PROJECTS.table, {"id": project_id})
        if row is None:
            raise NotFoundError("Projeto não encontrado.")
        return PROJECTS.from_row(row)

    async def create_project(self, name: str, description: str) -> Project:
        user = self.backend.require_user()

        payload = PROJECTS.to_insert_row({"name": name, "description": description}, user_id=user.id)
        rows = await self.rows.insert(PROJECTS.table, payload)
        logger.info("Project created", project_id=rows[0]["id"], user_id=user.id)
        return PROJECTS.from_row(rows[0])

    async def update_project(self, project_id: str, updates: DomainInput) -> Project:
        payload = PROJECTS.to_update_row(updates)
        if not payload:
            return await self.get_project_by_id(project_id)

        rows = await self.rows.update(PROJECTS.table, payload, {"id": project_id})
        if not rows:
            raise NotFoundError("Projeto não encontrado.")
        return PROJECTS.from_row(rows[0])

    async def delete_project(self, project_id: str) -> None:
        await self.rows.delete(PROJECTS.table, {"id": project_id})
        logger.info("Project deleted", project_id=project_id)
