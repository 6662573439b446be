from abc import ABC, abstractmethod
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

Row = Dict[str, Any]
Filters = Mapping[str, Any]


class IRowStore(ABC):
    """Interface for the backend row store.

    Tables are addressed by name and rows are plain snake_case dicts. Filters
    are equality predicates combined with AND.
    """

    @abstractmethod
    async def select(
        self,
        table: str,
        filters: Optional[Filters] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
    ) -> List[Row]:
        pass

    @abstractmethod
    async def select_one(self, table: str, filters: Filters) -> Optional[Row]:
        pass

    @abstractmethod
    async def insert(self, table: str, rows: Union[Row, Sequence[Row]]) -> List[Row]:
        """Insert one or many rows and return them with server-assigned columns."""
        pass

    @abstractmethod
    async def update(self, table: str, values: Row, filters: Filters) -> List[Row]:
        pass

    @abstractmethod
    async def delete(self, table: str, filters: Filters) -> int:
        pass

    @abstractmethod
    async def replace(self, table: str, filters: Filters, rows: Sequence[Row]) -> List[Row]:
        """Delete the rows matching ``filters`` and insert ``rows`` in one transaction."""
        pass
