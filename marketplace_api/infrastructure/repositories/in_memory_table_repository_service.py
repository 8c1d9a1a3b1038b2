import copy
import operator

from shared.utils.exceptions import EntityNotFoundException
from shared.utils.logging_config import get_logger
from marketplace_api.application.interfaces.service_interfaces import (
    CompareOperator,
    JoinOperator,
    TableServiceInterface,
)

logger = get_logger(__name__)

_COMPARATORS = {
    CompareOperator.EQUAL.value: operator.eq,
    CompareOperator.NOT_EQUAL.value: operator.ne,
    CompareOperator.GREATER_THAN.value: operator.gt,
    CompareOperator.GREATER_THAN_OR_EQUAL.value: operator.ge,
    CompareOperator.LESS_THAN.value: operator.lt,
    CompareOperator.LESS_THAN_OR_EQUAL.value: operator.le,
}

_KEY_FIELDS = {"PartitionKey", "RowKey"}


class InMemoryTableRepositoryService(TableServiceInterface):
    """
    Dictionary-backed table used for local development and tests.

    Filters follow Table Storage semantics: a clause on a property the entity
    does not have (or holds as None) never matches.
    """

    def __init__(self, table_name: str = "in_memory"):
        self.table_name = table_name
        self._entities: dict[tuple[str, str], dict] = {}

    async def upsert_entity(self, entity: dict, partition_key: str, row_key: str) -> str:
        stored = {k: v for k, v in copy.deepcopy(entity).items() if v is not None}
        stored["PartitionKey"] = partition_key
        stored["RowKey"] = row_key
        self._entities[(partition_key, row_key)] = stored
        logger.debug(f"Entity saved in memory. Table: {self.table_name} Row Key: {row_key}")
        return row_key

    async def get_entity(self, partition_key: str, row_key: str) -> dict | None:
        entity = self._entities.get((partition_key, row_key))
        return self._strip_keys(entity) if entity is not None else None

    async def delete_entity(self, partition_key: str, row_key: str) -> None:
        if self._entities.pop((partition_key, row_key), None) is None:
            raise EntityNotFoundException(f"Entity {partition_key}/{row_key} not found")

    async def query_entities_with_filters(self,
                                          filters: list[tuple],
                                          join_operator: JoinOperator = JoinOperator.AND) -> list[dict]:
        join = join_operator.value if isinstance(join_operator, JoinOperator) else join_operator
        combine = all if join == JoinOperator.AND.value else any
        results = []
        for entity in self._entities.values():
            if not filters or combine(self._matches(entity, item) for item in filters):
                results.append(self._strip_keys(entity))
        return results

    async def close(self) -> None:
        pass

    def clear(self) -> None:
        self._entities.clear()

    def _matches(self, entity: dict, item: tuple) -> bool:
        field_name, expected = item[0], item[1]
        op = item[2] if len(item) > 2 else CompareOperator.EQUAL.value
        op = op.value if isinstance(op, CompareOperator) else op
        actual = entity.get(field_name)
        if actual is None:
            return False
        try:
            return _COMPARATORS[op](actual, expected)
        except TypeError:
            return False

    def _strip_keys(self, entity: dict) -> dict:
        return {k: copy.deepcopy(v) for k, v in entity.items() if k not in _KEY_FIELDS}
