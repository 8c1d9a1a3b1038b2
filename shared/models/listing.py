"""
Listing domain model.
"""

from dataclasses import asdict, dataclass, field, fields
from datetime import datetime, timezone
from typing import Optional

from shared.models.constants import AGE_GROUPS
from shared.utils.convert import convert_from_table_entity, convert_to_table_entity


def age_range_for_group(age_group: Optional[str]) -> tuple[Optional[int], Optional[int]]:
    """Translate an age group label such as "8-12" or "21+" into (min_age, max_age)."""
    if not age_group:
        return None, None
    return AGE_GROUPS.get(age_group, (None, None))


DATETIME_FIELDS = frozenset({"approved_date", "created_date", "updated_date"})


@dataclass
class Listing:
    """
    Training offer published by a trainer.
    PartitionKey: "LISTING"
    RowKey: listing_id
    """

    # ========== IDENTIFICATION ==========
    listing_id: str  # RowKey
    category: str
    title: str
    price: float
    location: str
    description: str
    trainer_id: Optional[str] = None

    # ========== SCHEDULE ==========
    days: int = 1
    quantity: Optional[int] = None  # seats
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None

    # ========== AUDIENCE ==========
    gender: Optional[str] = None
    age_group: Optional[str] = None
    min_age: Optional[int] = None
    max_age: Optional[int] = None

    # ========== APPROVAL ==========
    is_approved: bool = False
    approved_by: Optional[str] = None
    approved_date: Optional[datetime] = None

    # ========== METADATA ==========
    created_date: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_date: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self):
        if self.age_group and self.min_age is None and self.max_age is None:
            self.min_age, self.max_age = age_range_for_group(self.age_group)

    def approve(self, approver_name: str) -> None:
        """Make the listing visible to clients."""
        now = datetime.now(timezone.utc)
        self.is_approved = True
        self.approved_by = approver_name
        self.approved_date = now
        self.updated_date = now

    def to_dict(self) -> dict:
        """Convert Listing dataclass to dictionary."""
        return convert_to_table_entity(asdict(self))

    @classmethod
    def from_dict(cls, data: dict) -> 'Listing':
        """Create Listing from a stored entity."""
        return cls(**convert_from_table_entity(data, {f.name for f in fields(cls)}, DATETIME_FIELDS))
