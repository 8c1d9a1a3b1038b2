import pytest
import pytest_asyncio

import uuid

from shared.config.settings import settings
from shared.utils.exceptions import EntityNotFoundException
from shared.utils.logging_config import get_logger, setup_logging
from shared.models.search_alert import SearchAlert
from marketplace_api.application.interfaces.service_interfaces import CompareOperator, TableServiceInterface
from marketplace_api.infrastructure.repositories.table_storage_service import TableStorageService

setup_logging(
        log_level=settings.log_level,
        log_file=settings.log_file,
        log_to_console=settings.log_to_console
    )
logger = get_logger(__name__)

pytestmark = pytest.mark.skipif(
    not settings.table_storage_account_url,
    reason="TABLE_STORAGE_ACCOUNT_URL is not configured",
)


class TestTableStorageRepository:

    @pytest_asyncio.fixture
    async def alert_repository(self):
        repository = TableStorageService(
            storage_account_url=settings.table_storage_account_url,
            table_name=settings.search_alerts_table_name,
        )
        await repository.ensure_table()
        yield repository
        await repository.close()

    @pytest.mark.asyncio
    async def test_upsert_query_delete(self, alert_repository: TableServiceInterface):
        marker = uuid.uuid4().hex[:8]
        alert = SearchAlert(alert_id=uuid.uuid4().hex[:12], email=f"it-{marker}@example.com",
                            category="Other", min_price=5.0, max_price=15.0)

        await alert_repository.upsert_entity(alert.to_dict(), partition_key="SEARCH_ALERT", row_key=alert.alert_id)

        stored = await alert_repository.get_entity("SEARCH_ALERT", alert.alert_id)
        assert stored["email"] == alert.email

        results = await alert_repository.query_entities_with_filters([
            ("email", alert.email, CompareOperator.EQUAL.value),
            ("min_price", 10.0, CompareOperator.LESS_THAN_OR_EQUAL.value),
            ("max_price", 10.0, CompareOperator.GREATER_THAN_OR_EQUAL.value),
        ])
        assert [SearchAlert.from_dict(r).alert_id for r in results] == [alert.alert_id]

        await alert_repository.delete_entity("SEARCH_ALERT", alert.alert_id)
        assert await alert_repository.get_entity("SEARCH_ALERT", alert.alert_id) is None
        with pytest.raises(EntityNotFoundException):
            await alert_repository.delete_entity("SEARCH_ALERT", alert.alert_id)
        logger.info("✓ test_upsert_query_delete passed")
