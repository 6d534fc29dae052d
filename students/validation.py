import re

from bson import ObjectId
from flask import request

from students.errors import AggregateError, UserCausedError

OBJECT_ID_PATTERN = re.compile(r"^[0-9a-fA-F]{24}$")
EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
MAX_TEXT_LENGTH = 255

TRUE_VALUES = {"true", "t", "yes", "y", "on", "1"}
FALSE_VALUES = {"false", "f", "no", "n", "off", "0"}


def to_object_id(value):
    if isinstance(value, ObjectId):
        return value
    if not isinstance(value, str) or not OBJECT_ID_PATTERN.match(value):
        raise UserCausedError(f"Invalid id: {value}")
    return ObjectId(value)


def to_boolean(value):
    """Interpret JSON booleans, numbers and the usual yes/no strings."""
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in TRUE_VALUES:
            return True
        if lowered in FALSE_VALUES:
            return False
    raise ValueError(f"{value!r} is not a boolean")


class Validator:
    """Collects field errors from a request body and raises them together."""

    def __init__(self, data):
        self.data = data if isinstance(data, dict) else {}
        self.errors = []

    def text(self, field, source=None, max_length=MAX_TEXT_LENGTH, label=None):
        source = self.data if source is None else source
        label = label or field
        value = source.get(field)
        if not isinstance(value, str) or not value.strip():
            self.errors.append((label, "must be a non-empty string"))
            return None
        value = value.strip()
        if len(value) > max_length:
            self.errors.append((label, f"must be at most {max_length} characters"))
            return None
        return value

    def email(self, field="email"):
        value = self.data.get(field)
        if not isinstance(value, str) or not EMAIL_PATTERN.match(value.strip()):
            self.errors.append((field, "must be a valid email"))
            return None
        return value.strip().lower()

    def person_name(self, field="name"):
        value = self.data.get(field)
        if not isinstance(value, dict):
            self.errors.append((field, "must be an object with first and last"))
            return None
        first = self.text("first", source=value, label=f"{field}.first")
        last = self.text("last", source=value, label=f"{field}.last")
        if first is None or last is None:
            return None
        return {"first": first, "last": last}

    def password(self, field="password", min_length=1):
        value = self.data.get(field)
        if not isinstance(value, str) or len(value) < min_length:
            self.errors.append((field, "is required"))
            return None
        return value

    def boolean(self, field):
        try:
            return to_boolean(self.data.get(field))
        except ValueError:
            self.errors.append((field, "must be a boolean"))
            return None

    def check(self):
        if self.errors:
            raise AggregateError(self.errors)


def request_data():
    """JSON body, falling back to form fields."""
    data = request.get_json(silent=True)
    if data is None:
        data = request.form.to_dict()
    return data
