"""Dependency Injection Container."""
from marketplace_api.application.interfaces.service_interfaces import EmailServiceInterface, TableServiceInterface
from marketplace_api.application.services.listing_service import ListingService
from marketplace_api.application.services.search_alert_service import SearchAlertService
from marketplace_api.application.services.trainer_service import TrainerService
from marketplace_api.infrastructure.notifications.in_memory_email_service import InMemoryEmailService
from marketplace_api.infrastructure.notifications.smtp_email_service import SmtpEmailService
from marketplace_api.infrastructure.azure_credential_manager import get_credential_manager
from marketplace_api.infrastructure.repositories.in_memory_table_repository_service import InMemoryTableRepositoryService
from marketplace_api.infrastructure.repositories.table_storage_service import TableStorageService
from shared.config.settings import settings
from shared.utils.logging_config import get_logger

logger = get_logger(__name__)

TRAINER_REPOSITORY = "trainer_repository"
LISTING_REPOSITORY = "listing_repository"
SEARCH_ALERT_REPOSITORY = "search_alert_repository"


class DIContainer:
    """Simple dependency injection container."""

    def __init__(self):
        self._singletons = {}
        self._setup_services()

    def _setup_services(self):

        logger.info("Setting up Singleton DI Container services...",
                    extra={"repository_type": settings.repository_type,
                           "email_provider": settings.email_provider})

        if settings.repository_type == "in_memory":
            self._singletons[TRAINER_REPOSITORY] = InMemoryTableRepositoryService(settings.trainers_table_name)
            self._singletons[LISTING_REPOSITORY] = InMemoryTableRepositoryService(settings.listings_table_name)
            self._singletons[SEARCH_ALERT_REPOSITORY] = InMemoryTableRepositoryService(settings.search_alerts_table_name)
        else:
            self._singletons[TRAINER_REPOSITORY] = TableStorageService(table_name=settings.trainers_table_name)
            self._singletons[LISTING_REPOSITORY] = TableStorageService(table_name=settings.listings_table_name)
            self._singletons[SEARCH_ALERT_REPOSITORY] = TableStorageService(table_name=settings.search_alerts_table_name)

        if settings.email_provider == "in_memory":
            self._singletons[EmailServiceInterface] = InMemoryEmailService()
        else:
            self._singletons[EmailServiceInterface] = SmtpEmailService()

    def get_service(self, service_key):
        # Return cached singleton if exists
        if service_key in self._singletons:
            return self._singletons[service_key]
        raise ValueError(f"Service {service_key} not registered")

    async def close(self) -> None:
        """Close all services that require cleanup."""
        for service in self._singletons.values():
            if hasattr(service, "close") and callable(service.close):
                await service.close()


# Global container instance, built on first use
_container: DIContainer | None = None


def get_container() -> DIContainer:
    global _container
    if _container is None:
        _container = DIContainer()
    return _container


async def close_all_services() -> None:
    """Close all services that require cleanup."""
    global _container
    if _container is None:
        return
    await _container.close()
    if settings.repository_type != "in_memory":
        await get_credential_manager().close()
    _container = None


def get_trainer_repository() -> TableServiceInterface:
    return get_container().get_service(TRAINER_REPOSITORY)

def get_listing_repository() -> TableServiceInterface:
    return get_container().get_service(LISTING_REPOSITORY)

def get_search_alert_repository() -> TableServiceInterface:
    return get_container().get_service(SEARCH_ALERT_REPOSITORY)

def get_email_service() -> EmailServiceInterface:
    return get_container().get_service(EmailServiceInterface)


def get_trainer_service() -> TrainerService:
    """Dependency injection function for trainer service."""
    return TrainerService(get_trainer_repository())

def get_search_alert_service() -> SearchAlertService:
    """Dependency injection function for search alert service."""
    return SearchAlertService(get_search_alert_repository(), get_email_service())

def get_listing_service() -> ListingService:
    """Dependency injection function for listing service."""
    return ListingService(get_listing_repository(), get_search_alert_service())
