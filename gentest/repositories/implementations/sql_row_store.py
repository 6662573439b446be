from typing import Any, Dict, List, Optional, Sequence, Union

import structlog
from sqlalchemy import Table, and_, delete, insert, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from gentest.core.exceptions import BackendError
from gentest.models.database import Base
from gentest.repositories.interfaces.row_store import Filters, IRowStore, Row

logger = structlog.get_logger()


class SQLRowStore(IRowStore):
    """SQLAlchemy implementation of the row store"""

    def __init__(self, db: Session):
        self.db = db

    async def select(
        self,
        table: str,
        filters: Optional[Filters] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
    ) -> List[Row]:
        t = self._table(table)
        stmt = select(t)
        if filters:
            stmt = stmt.where(self._where(t, filters))
        if order_by:
            column = t.c[order_by]
            stmt = stmt.order_by(column.desc() if descending else column.asc())
        return self._run(table, "select", lambda: [dict(r) for r in self.db.execute(stmt).mappings()])

    async def select_one(self, table: str, filters: Filters) -> Optional[Row]:
        t = self._table(table)
        stmt = select(t).where(self._where(t, filters)).limit(1)

        def run():
            row = self.db.execute(stmt).mappings().first()
            return dict(row) if row is not None else None

        return self._run(table, "select_one", run)

    async def insert(self, table: str, rows: Union[Row, Sequence[Row]]) -> List[Row]:
        t = self._table(table)
        batch = [rows] if isinstance(rows, dict) else list(rows)

        def run():
            inserted = self._insert_rows(t, batch)
            self.db.commit()
            return inserted

        return self._run(table, "insert", run)

    async def update(self, table: str, values: Row, filters: Filters) -> List[Row]:
        t = self._table(table)
        stmt = update(t).where(self._where(t, filters)).values(**values).returning(*t.c)

        def run():
            updated = [dict(r) for r in self.db.execute(stmt).mappings()]
            self.db.commit()
            return updated

        return self._run(table, "update", run)

    async def delete(self, table: str, filters: Filters) -> int:
        t = self._table(table)
        stmt = delete(t).where(self._where(t, filters))

        def run():
            result = self.db.execute(stmt)
            self.db.commit()
            return result.rowcount

        return self._run(table, "delete", run)

    async def replace(self, table: str, filters: Filters, rows: Sequence[Row]) -> List[Row]:
        t = self._table(table)

        def run():
            self.db.execute(delete(t).where(self._where(t, filters)))
            inserted = self._insert_rows(t, list(rows))
            self.db.commit()
            return inserted

        return self._run(table, "replace", run)

    def _insert_rows(self, t: Table, batch: List[Row]) -> List[Row]:
        inserted = []
        for row in batch:
            result = self.db.execute(insert(t).values(**row).returning(*t.c))
            inserted.append(dict(result.mappings().one()))
        return inserted

    def _run(self, table: str, operation: str, fn):
        try:
            return fn()
        except SQLAlchemyError as e:
            self.db.rollback()
            message = str(getattr(e, "orig", None) or e)
            logger.error("Row store operation failed", table=table, operation=operation, error=message)
            raise BackendError(message)

    @staticmethod
    def _table(name: str) -> Table:
        try:
            return Base.metadata.tables[name]
        except KeyError:
            raise BackendError(f"Tabela desconhecida: {name}")

    @staticmethod
    def _where(t: Table, filters: Filters):
        try:
            return and_(*(t.c[column] == value for column, value in filters.items()))
        except KeyError as e:
            raise BackendError(f"Coluna desconhecida em {t.name}: {e.args[0]}")
