import pytest
import pytest_asyncio

from shared.config.settings import settings
from shared.utils.exceptions import DuplicateTrainerException, TrainerNotFoundException
from shared.utils.logging_config import get_logger, setup_logging
from shared.utils.passwords import verify_password
from marketplace_api.application.services.trainer_service import TrainerService
from marketplace_api.infrastructure.repositories.in_memory_table_repository_service import InMemoryTableRepositoryService

setup_logging(
        log_level=settings.log_level,
        log_file=settings.log_file,
        log_to_console=settings.log_to_console
    )
logger = get_logger(__name__)


class TestTrainerService:

    @pytest_asyncio.fixture
    async def trainer_repository(self, trainers_data):
        repo = InMemoryTableRepositoryService("trainers")
        for trainer in trainers_data:
            await repo.upsert_entity(trainer, partition_key="TRAINER", row_key=trainer["trainer_id"])
        yield repo
        await repo.close()

    @pytest_asyncio.fixture
    async def trainer_service(self, trainer_repository):
        return TrainerService(trainer_repository=trainer_repository)

    @pytest.mark.asyncio
    async def test_register_trainer(self, trainer_service: TrainerService, trainer_repository):
        trainer = await trainer_service.register_trainer(
            fname=" Lee ", lname="Park", email="Lee.Park@Example.com", password="Str0ng!pass", phone="555-0100"
        )

        assert trainer.is_approved is False
        assert trainer.email == "lee.park@example.com"
        assert trainer.fname == "Lee"
        assert trainer.password_hash != "Str0ng!pass"
        assert verify_password("Str0ng!pass", trainer.password_hash)
        assert not verify_password("wrong-password", trainer.password_hash)
        stored = await trainer_repository.get_entity("TRAINER", trainer.trainer_id)
        assert stored["email"] == "lee.park@example.com"
        logger.info("✓ test_register_trainer passed")

    @pytest.mark.asyncio
    async def test_register_duplicate_email(self, trainer_service: TrainerService):
        await trainer_service.register_trainer("Lee", "Park", "lee@example.com", "Str0ng!pass")

        with pytest.raises(DuplicateTrainerException):
            await trainer_service.register_trainer("Lee", "Again", "LEE@example.com", "Str0ng!pass")

    @pytest.mark.asyncio
    async def test_approved_and_pending(self, trainer_service: TrainerService):
        approved = await trainer_service.get_approved_trainers()
        pending = await trainer_service.get_pending_trainers()

        assert [t.trainer_id for t in approved] == ["a1b2c3d4e5f6"]
        assert sorted(t.trainer_id for t in pending) == ["b2c3d4e5f6a1", "c3d4e5f6a1b2"]

    @pytest.mark.asyncio
    async def test_approve_trainer(self, trainer_service: TrainerService):
        trainer = await trainer_service.approve_trainer("b2c3d4e5f6a1", "admin")

        assert trainer.is_approved is True
        assert trainer.approved_by == "admin"
        assert trainer.approved_date is not None
        approved_ids = [t.trainer_id for t in await trainer_service.get_approved_trainers()]
        assert "b2c3d4e5f6a1" in approved_ids

    @pytest.mark.asyncio
    async def test_approve_missing_trainer(self, trainer_service: TrainerService):
        with pytest.raises(TrainerNotFoundException):
            await trainer_service.approve_trainer("NONEXISTENT", "admin")

    @pytest.mark.asyncio
    async def test_pending_trainer_is_hidden(self, trainer_service: TrainerService):
        with pytest.raises(TrainerNotFoundException):
            await trainer_service.get_approved_trainer("b2c3d4e5f6a1")

        trainer = await trainer_service.get_approved_trainer("a1b2c3d4e5f6")
        assert trainer.full_name == "Maya Lopez"

    @pytest.mark.asyncio
    async def test_discard_trainer(self, trainer_service: TrainerService):
        removed = await trainer_service.discard_trainer("c3d4e5f6a1b2")

        assert removed.trainer_id == "c3d4e5f6a1b2"
        with pytest.raises(TrainerNotFoundException):
            await trainer_service.get_trainer("c3d4e5f6a1b2")
        with pytest.raises(TrainerNotFoundException):
            await trainer_service.discard_trainer("c3d4e5f6a1b2")
