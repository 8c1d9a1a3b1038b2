"""
Search alert domain model.
"""

from dataclasses import asdict, dataclass, field, fields
from datetime import datetime, timezone
from typing import Optional

from shared.utils.convert import convert_from_table_entity, convert_to_table_entity


DATETIME_FIELDS = frozenset({"created_date"})


@dataclass
class SearchAlert:
    """
    A client's saved search. Every criterion is optional; an alert that leaves
    a criterion empty is only matched by listings that leave it empty too.
    PartitionKey: "SEARCH_ALERT"
    RowKey: alert_id
    """

    alert_id: str  # RowKey
    email: str
    category: Optional[str] = None
    gender: Optional[str] = None
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    min_age: Optional[int] = None
    max_age: Optional[int] = None
    created_date: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict:
        """Convert SearchAlert dataclass to dictionary."""
        return convert_to_table_entity(asdict(self))

    @classmethod
    def from_dict(cls, data: dict) -> 'SearchAlert':
        """Create SearchAlert from a stored entity."""
        return cls(**convert_from_table_entity(data, {f.name for f in fields(cls)}, DATETIME_FIELDS))
