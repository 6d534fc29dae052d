from datetime import datetime, timezone

from students.errors import ResourceNotFoundError
from students.validation import to_object_id


def utcnow():
    return datetime.now(timezone.utc)


def isoformat(value):
    if value is None:
        return None
    # MongoDB hands back naive datetimes that are already UTC
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()


def object_ids_to_json(ids):
    return [str(object_id) for object_id in ids]


class Document:
    """Thin wrapper over a raw MongoDB document."""

    collection = None
    not_found_message = "Resource was not found"
    projection = None

    def __init__(self, doc):
        self.doc = doc

    @property
    def id(self):
        return self.doc["_id"]

    @classmethod
    def find_by_id(cls, object_id):
        doc = cls.collection().find_one({"_id": to_object_id(object_id)}, cls.projection)
        return cls(doc) if doc is not None else None

    @classmethod
    def get(cls, object_id):
        found = cls.find_by_id(object_id)
        if found is None:
            raise ResourceNotFoundError(cls.not_found_message)
        return found

    @classmethod
    def find_many(cls, ids):
        """Return documents for ``ids`` in the order the ids are given."""
        docs = cls.collection().find({"_id": {"$in": list(ids)}}, cls.projection)
        by_id = {doc["_id"]: cls(doc) for doc in docs}
        return [by_id[object_id] for object_id in ids if object_id in by_id]
