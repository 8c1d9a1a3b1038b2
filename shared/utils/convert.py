from datetime import datetime
from enum import Enum
import json


def convert_to_table_entity(data: dict) -> dict:
    """Convert complex types to Azure Table Storage compatible types."""
    entity = {}
    for key, value in data.items():
        if value is None:
            entity[key] = None
        elif isinstance(value, Enum):
            entity[key] = value.value
        elif isinstance(value, (list, dict)):
            entity[key] = json.dumps(value, default=str)
        elif isinstance(value, datetime):
            entity[key] = value
        elif isinstance(value, (str, int, float, bool, bytes)):
            entity[key] = value
        else:
            entity[key] = str(value)
    return entity


def convert_from_table_entity(data: dict, field_names: set[str], datetime_fields: frozenset = frozenset()) -> dict:
    """
    Prepare a stored entity for a dataclass constructor.

    Drops keys the dataclass does not declare (PartitionKey, RowKey, etag...),
    turns TablesEntityDatetime values back into plain datetimes and parses ISO
    strings found in `datetime_fields` (JSON fixtures carry them as text).
    """
    converted_data = {}
    for key, value in data.items():
        if key not in field_names:
            continue
        if hasattr(value, '__class__') and 'TablesEntityDatetime' in value.__class__.__name__:
            converted_data[key] = datetime.fromisoformat(value.isoformat())
        elif key in datetime_fields and isinstance(value, str) and value:
            converted_data[key] = datetime.fromisoformat(value)
        else:
            converted_data[key] = value
    return converted_data


def to_json_safe(entity: dict) -> dict:
    """Render datetimes as ISO strings so an entity can go out in a JSON response."""
    return {
        key: value.isoformat() if isinstance(value, datetime) else value
        for key, value in entity.items()
    }
