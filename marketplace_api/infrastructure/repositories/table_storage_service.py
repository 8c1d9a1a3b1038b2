from azure.core.exceptions import ResourceExistsError, ResourceNotFoundError
from azure.data.tables import UpdateMode
from azure.data.tables.aio import TableClient

from shared.config.settings import settings
from shared.utils.exceptions import (
    EntityDeleteException,
    EntityNotFoundException,
    EntityQueryException,
    EntityUpsertException,
)
from shared.utils.logging_config import get_logger
from marketplace_api.infrastructure.azure_credential_manager import get_credential_manager
from marketplace_api.application.interfaces.service_interfaces import (
    CompareOperator,
    JoinOperator,
    TableServiceInterface,
)


logger = get_logger(__name__)

AZURE_TABLE_METADATA_FIELDS = {'PartitionKey', 'RowKey', 'Timestamp', 'etag', 'odata.etag', 'odata.metadata'}


def build_odata_filter(filters: list[tuple], join_operator: JoinOperator) -> tuple[str | None, dict]:
    """
    Turn (field, value, operator) tuples into a parameterized OData filter.

    Values never get interpolated into the query text; each one is bound as
    @p0, @p1, ... so quotes in user data cannot break the expression.
    """
    if not filters:
        return None, {}

    clauses = []
    parameters = {}
    for index, item in enumerate(filters):
        field_name, value = item[0], item[1]
        operator = item[2] if len(item) > 2 else CompareOperator.EQUAL.value
        operator = operator.value if isinstance(operator, CompareOperator) else operator
        param_name = f"p{index}"
        clauses.append(f"{field_name} {operator} @{param_name}")
        parameters[param_name] = value

    join = join_operator.value if isinstance(join_operator, JoinOperator) else join_operator
    return f" {join} ".join(clauses), parameters


class TableStorageService(TableServiceInterface):

    def __init__(self, storage_account_url: str = None, table_name: str = None):

        self.account_url = storage_account_url or settings.table_storage_account_url
        self.table_name = table_name or settings.trainers_table_name

        credential_manager = get_credential_manager()
        self.table_client = TableClient(
            endpoint=self.account_url,
            table_name=self.table_name,
            credential=credential_manager.get_credential()
        )

    async def ensure_table(self) -> None:
        """Create the table on first use."""
        try:
            await self.table_client.create_table()
            logger.info(f"Table '{self.table_name}' created")
        except ResourceExistsError:
            logger.debug(f"Table '{self.table_name}' already exists")

    async def upsert_entity(self, entity: dict, partition_key: str, row_key: str) -> str:
        """Save an entity to the Azure Table Storage."""
        try:
            # unset properties are left out so filters on them never match
            entity = {k: v for k, v in entity.items() if v is not None}
            entity["PartitionKey"] = partition_key
            entity["RowKey"] = row_key

            _ = await self.table_client.upsert_entity(entity=entity, mode=UpdateMode.REPLACE)
            logger.info(f"Entity saved successfully. Table: {self.table_name} Row Key: {row_key}")
            return row_key
        except Exception as e:
            logger.error(f"Error saving entity to Table Storage: {e}",
                         extra={"table": self.table_name, "row_key": row_key})
            raise EntityUpsertException(str(e)) from e

    async def get_entity(self, partition_key: str, row_key: str) -> dict | None:
        """Retrieve entity data from Azure Table Storage by entity ID."""

        try:
            entity = await self.table_client.get_entity(partition_key=partition_key, row_key=row_key)
            logger.info(f"Entity retrieved successfully. Row Key: {row_key}")
            return self._strip_metadata(dict(entity))
        except ResourceNotFoundError:
            logger.info(f"Entity not found. Table: {self.table_name} Row Key: {row_key}")
            return None
        except Exception as e:
            logger.error(f"Error retrieving entity from Table Storage: {e}",
                         extra={"table": self.table_name, "row_key": row_key})
            raise EntityQueryException(str(e)) from e

    async def delete_entity(self, partition_key: str, row_key: str) -> None:
        """Delete entity data from Azure Table Storage by entity ID."""
        try:
            await self.table_client.delete_entity(partition_key=partition_key, row_key=row_key)
            logger.info(f"Entity deleted successfully. Row Key: {row_key}")
        except ResourceNotFoundError as e:
            raise EntityNotFoundException(f"Entity {partition_key}/{row_key} not found") from e
        except Exception as e:
            logger.error(f"Error deleting entity from Table Storage: {e}",
                         extra={"table": self.table_name, "row_key": row_key})
            raise EntityDeleteException(str(e)) from e

    async def query_entities_with_filters(self,
                                          filters: list[tuple],
                                          join_operator: JoinOperator = JoinOperator.AND) -> list[dict]:
        """Query entities with an OData filter built from the given tuples."""
        query_filter, parameters = build_odata_filter(filters, join_operator)
        logger.debug("Querying table", extra={"table": self.table_name, "filter": query_filter})
        try:
            if query_filter is None:
                pages = self.table_client.list_entities()
            else:
                pages = self.table_client.query_entities(query_filter, parameters=parameters)
            return [self._strip_metadata(dict(entity)) async for entity in pages]
        except Exception as e:
            logger.error(f"Error querying Table Storage: {e}",
                         extra={"table": self.table_name, "filter": query_filter})
            raise EntityQueryException(str(e)) from e

    async def close(self) -> None:
        """Close the Table Storage client."""
        if self.table_client:
            await self.table_client.close()
            logger.info("Table Storage client closed.")

    def _strip_metadata(self, entity: dict) -> dict:
        """Remove Azure Table Storage metadata fields."""
        return {k: v for k, v in entity.items() if k not in AZURE_TABLE_METADATA_FIELDS}
