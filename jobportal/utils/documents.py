from datetime import date, datetime, time

from bson import ObjectId

from jobportal.utils.errors import ValidationFailed


def as_object_id(value: str, label: str = "ID") -> ObjectId:
    if not ObjectId.is_valid(value):
        raise ValidationFailed(f"Invalid {label}")
    return ObjectId(value)


def as_datetime(value: date) -> datetime:
    """BSON has no plain date type, store dates as midnight datetimes."""
    if isinstance(value, datetime):
        return value
    return datetime.combine(value, time.min)


def serialize(doc: dict, hidden=("password",)) -> dict:
    """Copy a Mongo document with ``_id`` exposed as a string ``id``."""
    data = {k: v for k, v in doc.items() if k != "_id" and k not in hidden}
    data["id"] = str(doc["_id"])
    return data
