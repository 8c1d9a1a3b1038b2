import asyncio
from datetime import datetime, timezone
from typing import Optional
import uuid

from shared.models.trainer import Trainer
from shared.utils.constants import ENTITY_ID_LENGTH, PartitionKeys
from shared.utils.exceptions import (
    DuplicateTrainerException,
    EntityNotFoundException,
    TrainerNotFoundException,
)
from shared.utils.logging_config import get_logger
from shared.utils.passwords import hash_password
from marketplace_api.application.interfaces.service_interfaces import (
    CompareOperator,
    JoinOperator,
    TableServiceInterface,
)

logger = get_logger(__name__)


class TrainerService:

    def __init__(self, trainer_repository: TableServiceInterface):
        self.repository = trainer_repository
        logger.info("TrainerService initialized with repository",
                    extra={"repository_type": type(trainer_repository).__name__})

    async def register_trainer(self,
                               fname: str,
                               lname: str,
                               email: str,
                               password: str,
                               phone: Optional[str] = None) -> Trainer:
        """Create a trainer account that stays hidden until an admin approves it."""
        email = email.strip().lower()
        existing = await self._query([("email", email, CompareOperator.EQUAL.value)])
        if existing:
            logger.warning("Signup with an already registered email", extra={"email": email})
            raise DuplicateTrainerException(f"A trainer with email {email} already exists")

        password_hash = await asyncio.to_thread(hash_password, password)
        now = datetime.now(timezone.utc)
        trainer = Trainer(
            trainer_id=uuid.uuid4().hex[:ENTITY_ID_LENGTH],
            fname=fname.strip(),
            lname=lname.strip(),
            email=email,
            phone=phone,
            password_hash=password_hash,
            is_approved=False,
            created_date=now,
            updated_date=now,
        )
        await self.repository.upsert_entity(
            trainer.to_dict(),
            partition_key=PartitionKeys.TRAINER.value,
            row_key=trainer.trainer_id
        )
        logger.info("Trainer registered", extra={"trainer_id": trainer.trainer_id})
        return trainer

    async def get_approved_trainers(self) -> list[Trainer]:
        return await self._query([("is_approved", True, CompareOperator.EQUAL.value)])

    async def get_pending_trainers(self) -> list[Trainer]:
        return await self._query([("is_approved", False, CompareOperator.EQUAL.value)])

    async def get_trainer(self, trainer_id: str) -> Trainer:
        entity = await self.repository.get_entity(
            partition_key=PartitionKeys.TRAINER.value, row_key=trainer_id
        )
        if entity is None:
            raise TrainerNotFoundException(f"Trainer {trainer_id} not found")
        return Trainer.from_dict(entity)

    async def get_approved_trainer(self, trainer_id: str) -> Trainer:
        """Look up a trainer the public is allowed to see."""
        trainer = await self.get_trainer(trainer_id)
        if not trainer.is_approved:
            raise TrainerNotFoundException(f"Trainer {trainer_id} not found")
        return trainer

    async def approve_trainer(self, trainer_id: str, approver_name: str) -> Trainer:
        trainer = await self.get_trainer(trainer_id)
        trainer.approve(approver_name)
        await self.repository.upsert_entity(
            trainer.to_dict(),
            partition_key=PartitionKeys.TRAINER.value,
            row_key=trainer.trainer_id
        )
        logger.info("Trainer approved",
                    extra={"trainer_id": trainer_id, "approver_name": approver_name})
        return trainer

    async def discard_trainer(self, trainer_id: str) -> Trainer:
        """Delete a trainer and return what was removed."""
        trainer = await self.get_trainer(trainer_id)
        try:
            await self.repository.delete_entity(
                partition_key=PartitionKeys.TRAINER.value, row_key=trainer_id
            )
        except EntityNotFoundException as e:
            raise TrainerNotFoundException(f"Trainer {trainer_id} not found") from e
        logger.info("Trainer discarded", extra={"trainer_id": trainer_id})
        return trainer

    async def _query(self, filters: list[tuple]) -> list[Trainer]:
        filters = [("PartitionKey", PartitionKeys.TRAINER.value, CompareOperator.EQUAL.value)] + filters
        entities = await self.repository.query_entities_with_filters(
            filters=filters, join_operator=JoinOperator.AND
        )
        return [Trainer.from_dict(entity) for entity in entities]
