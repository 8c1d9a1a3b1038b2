"""
Trainer domain model.
"""

from dataclasses import asdict, dataclass, field, fields
from datetime import datetime, timezone
from typing import Optional

from shared.utils.convert import convert_from_table_entity, convert_to_table_entity


DATETIME_FIELDS = frozenset({"approved_date", "created_date", "updated_date"})


@dataclass
class Trainer:
    """
    Trainer account aligned with Azure Table Storage schema.
    PartitionKey: "TRAINER" (all trainers in single partition)
    RowKey: trainer_id
    """

    # ========== IDENTIFICATION ==========
    trainer_id: str  # RowKey
    fname: str
    lname: str
    email: str
    phone: Optional[str] = None
    password_hash: Optional[str] = None  # bcrypt

    # ========== APPROVAL ==========
    is_approved: bool = False
    approved_by: Optional[str] = None
    approved_date: Optional[datetime] = None

    # ========== METADATA ==========
    created_date: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_date: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def full_name(self) -> str:
        return f"{self.fname} {self.lname}".strip()

    def approve(self, approver_name: str) -> None:
        """Open the trainer account to the public listing pages."""
        now = datetime.now(timezone.utc)
        self.is_approved = True
        self.approved_by = approver_name
        self.approved_date = now
        self.updated_date = now

    def to_dict(self) -> dict:
        """Convert Trainer dataclass to dictionary."""
        return convert_to_table_entity(asdict(self))

    def to_public_dict(self) -> dict:
        """Trainer fields that are safe to send to API clients."""
        data = asdict(self)
        data.pop("password_hash", None)
        return data

    def to_card(self) -> dict:
        """Fields rendered by the trainer card."""
        return {
            "trainer_id": self.trainer_id,
            "fname": self.fname,
            "lname": self.lname,
            "email": self.email,
            "phone": self.phone,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'Trainer':
        """Create Trainer from a stored entity."""
        return cls(**convert_from_table_entity(data, {f.name for f in fields(cls)}, DATETIME_FIELDS))
