import logging

from pymongo.errors import DuplicateKeyError
from werkzeug.security import check_password_hash, generate_password_hash

from students import db
from students.errors import AuthenticationError, DuplicateError
from students.models.base import Document, isoformat, object_ids_to_json, utcnow

logger = logging.getLogger(__name__)


class User(Document):
    collection = staticmethod(db.users)
    not_found_message = "User was not found"
    projection = {"password": 0}

    @property
    def email(self):
        return self.doc["email"]

    @property
    def groups(self):
        return self.doc.setdefault("groups", [])

    @classmethod
    def create(cls, email, name, password):
        if cls.collection().find_one({"email": email}, {"_id": 1}) is not None:
            raise DuplicateError("Registration failed. A user with this email exists.")

        now = utcnow()
        doc = {
            "name": name,
            "email": email,
            "password": generate_password_hash(password),
            "groups": [],
            "createdAt": now,
            "updatedAt": now,
        }
        try:
            db.acknowledged(cls.collection().insert_one(doc))
        except DuplicateKeyError:
            raise DuplicateError("Registration failed. A user with this email exists.")

        logger.info("Registered user %s", doc["_id"])
        del doc["password"]
        return cls(doc)

    @classmethod
    def find_by_email(cls, email):
        doc = cls.collection().find_one({"email": email.strip().lower()}, cls.projection)
        return cls(doc) if doc is not None else None

    @classmethod
    def authenticate(cls, email, password):
        doc = cls.collection().find_one({"email": email})
        if doc is None:
            raise AuthenticationError("Authentication failed. User not found.", "email")
        if not check_password_hash(doc["password"], password):
            raise AuthenticationError("Authentication failed. Wrong password.", "password")

        del doc["password"]
        return cls(doc)

    @classmethod
    def find_in_queue(cls, queue_id):
        from students.models.queue import Queue

        queue = Queue.get(queue_id)
        return cls.find_many(queue.member_ids)

    def to_json(self):
        return {
            "id": str(self.id),
            "name": self.doc.get("name"),
            "email": self.email,
            "groups": object_ids_to_json(self.groups),
            "createdAt": isoformat(self.doc.get("createdAt")),
            "updatedAt": isoformat(self.doc.get("updatedAt")),
        }
