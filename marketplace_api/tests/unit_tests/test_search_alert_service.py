import pytest
import pytest_asyncio
from unittest.mock import AsyncMock

from shared.config.settings import settings
from shared.utils.exceptions import EmailDeliveryException, EntityQueryException, ValidationException
from shared.utils.logging_config import get_logger, setup_logging
from shared.models.listing import Listing
from shared.models.search_alert import SearchAlert
from marketplace_api.application.interfaces.service_interfaces import EmailServiceInterface, TableServiceInterface
from marketplace_api.application.services.search_alert_service import SearchAlertService
from marketplace_api.infrastructure.notifications.in_memory_email_service import InMemoryEmailService
from marketplace_api.infrastructure.notifications.search_alert_email import (
    SEARCH_ALERT_SUBJECT,
    render_search_alert_email,
)
from marketplace_api.infrastructure.repositories.in_memory_table_repository_service import InMemoryTableRepositoryService

setup_logging(
        log_level=settings.log_level,
        log_file=settings.log_file,
        log_to_console=settings.log_to_console
    )
logger = get_logger(__name__)


class TestSearchAlertService:

    @pytest_asyncio.fixture
    async def alert_repository(self, search_alerts_data):
        """In-memory search alert table loaded with the seed alerts."""
        repo = InMemoryTableRepositoryService("searchalerts")
        for alert in search_alerts_data:
            await repo.upsert_entity(alert, partition_key="SEARCH_ALERT", row_key=alert["alert_id"])
        yield repo
        await repo.close()

    @pytest_asyncio.fixture
    async def email_service(self):
        service = InMemoryEmailService()
        yield service
        await service.close()

    @pytest_asyncio.fixture
    async def search_alert_service(self, alert_repository, email_service):
        return SearchAlertService(search_alert_repository=alert_repository, email_service=email_service)

    @pytest_asyncio.fixture
    async def yoga_listing(self, listings_data):
        return Listing.from_dict(listings_data[0])

    @pytest.mark.asyncio
    async def test_find_matching_alerts(self, search_alert_service: SearchAlertService, yoga_listing):
        alerts = await search_alert_service.find_matching_alerts(yoga_listing)

        assert sorted(a.alert_id for a in alerts) == ["0a1b2c3d4e5f", "4e5f0a1b2c3d"]
        logger.info("✓ test_find_matching_alerts passed")

    @pytest.mark.asyncio
    async def test_notify_deduplicates_recipients(self, search_alert_service: SearchAlertService,
                                                  email_service: InMemoryEmailService, yoga_listing):
        notified = await search_alert_service.notify_matching_alerts(yoga_listing)

        assert notified == 1
        assert len(email_service.outbox) == 1
        sent = email_service.outbox[0]
        assert sent.recipients == ["parent.one@example.com"]
        assert sent.subject == SEARCH_ALERT_SUBJECT
        assert "Morning yoga for teens" in sent.text_body
        logger.info("✓ test_notify_deduplicates_recipients passed")

    @pytest.mark.asyncio
    async def test_notify_without_matches_sends_nothing(self, search_alert_service: SearchAlertService,
                                                        email_service: InMemoryEmailService, listings_data):
        free_listing = Listing.from_dict(listings_data[2])

        notified = await search_alert_service.notify_matching_alerts(free_listing)

        assert notified == 0
        assert email_service.outbox == []

    @pytest.mark.asyncio
    async def test_notify_swallows_email_failure(self, alert_repository, yoga_listing):
        failing_email = AsyncMock(spec=EmailServiceInterface)
        failing_email.send_email.side_effect = EmailDeliveryException("smtp down")
        service = SearchAlertService(search_alert_repository=alert_repository, email_service=failing_email)

        notified = await service.notify_matching_alerts(yoga_listing)

        assert notified == 0
        failing_email.send_email.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_notify_swallows_query_failure(self, email_service, yoga_listing):
        failing_repo = AsyncMock(spec=TableServiceInterface)
        failing_repo.query_entities_with_filters.side_effect = EntityQueryException("table unavailable")
        service = SearchAlertService(search_alert_repository=failing_repo, email_service=email_service)

        notified = await service.notify_matching_alerts(yoga_listing)

        assert notified == 0
        assert email_service.outbox == []

    @pytest.mark.asyncio
    async def test_create_search_alert(self, search_alert_service: SearchAlertService, alert_repository):
        alert = SearchAlert(alert_id="", email=" New.Parent@Example.com ", category="Basketball",
                            min_price=10, max_price=50, min_age=8, max_age=12)

        created = await search_alert_service.create_search_alert(alert)

        assert len(created.alert_id) == 12
        assert created.email == "new.parent@example.com"
        stored = await alert_repository.get_entity("SEARCH_ALERT", created.alert_id)
        assert stored["min_price"] == 10.0
        assert isinstance(stored["max_price"], float)
        assert "gender" not in stored

    @pytest.mark.asyncio
    async def test_create_search_alert_rejects_inverted_range(self, search_alert_service: SearchAlertService):
        alert = SearchAlert(alert_id="", email="parent@example.com", min_price=50.0, max_price=10.0)

        with pytest.raises(ValidationException):
            await search_alert_service.create_search_alert(alert)

    @pytest.mark.asyncio
    async def test_created_alert_is_matched(self, search_alert_service: SearchAlertService,
                                            email_service: InMemoryEmailService, listings_data):
        basketball = Listing.from_dict(listings_data[1])
        await search_alert_service.create_search_alert(
            SearchAlert(alert_id="", email="hoops@example.com", category="Basketball", gender="Male",
                        min_price=30.0, max_price=45.0, min_age=10, max_age=12)
        )

        notified = await search_alert_service.notify_matching_alerts(basketball)

        assert notified == 2
        assert sorted(email_service.outbox[0].recipients) == ["coach.fan@example.com", "hoops@example.com"]


class TestSearchAlertEmail:

    def test_free_listing_price(self, listings_data):
        content = render_search_alert_email(Listing.from_dict(listings_data[2]))

        assert "Free" in content.text_body
        assert content.subject == SEARCH_ALERT_SUBJECT

    def test_html_is_escaped(self):
        listing = Listing(listing_id="x1", category="Other", title="<b>Bold</b> moves", price=10.0,
                          location="Hall & Gym", description="Fun")

        content = render_search_alert_email(listing)

        assert "<b>Bold</b>" not in content.html_body
        assert "&lt;b&gt;Bold&lt;/b&gt;" in content.html_body
        assert "Hall &amp; Gym" in content.html_body
