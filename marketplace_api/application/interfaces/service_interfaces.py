"""
Repository and notification interfaces for dependency injection.
"""
from abc import ABC, abstractmethod
from enum import Enum


class CompareOperator(str, Enum):
    """OData comparison operators supported by the table queries."""
    EQUAL = "eq"
    NOT_EQUAL = "ne"
    GREATER_THAN = "gt"
    GREATER_THAN_OR_EQUAL = "ge"
    LESS_THAN = "lt"
    LESS_THAN_OR_EQUAL = "le"


class JoinOperator(str, Enum):
    """How the individual filter clauses are combined."""
    AND = "and"
    OR = "or"


class TableServiceInterface(ABC):
    """Abstract base class for document store implementations."""

    @abstractmethod
    async def upsert_entity(self, entity: dict, partition_key: str, row_key: str) -> str:
        """Upsert an entity in the table storage."""
        pass

    @abstractmethod
    async def get_entity(self, partition_key: str, row_key: str) -> dict | None:
        """Retrieve entity by ID."""
        pass

    @abstractmethod
    async def delete_entity(self, partition_key: str, row_key: str) -> None:
        """Delete entity by ID."""
        pass

    @abstractmethod
    async def query_entities_with_filters(self,
                                          filters: list[tuple],
                                          join_operator: JoinOperator = JoinOperator.AND) -> list[dict]:
        """
        Query entities matching every (or any) filter.

        Each filter is a (field, value, operator) tuple, operator being a
        CompareOperator value. Two-item tuples default to equality. An empty
        filter list returns every entity.
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close any resources held by the service."""
        pass


class EmailServiceInterface(ABC):
    """Abstract base class for outgoing email implementations."""

    @abstractmethod
    async def send_email(self,
                         recipients: list[str],
                         subject: str,
                         text_body: str,
                         html_body: str | None = None) -> int:
        """Send one message to every recipient. Returns the number of recipients."""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close any resources held by the service."""
        pass
