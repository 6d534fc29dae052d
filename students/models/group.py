import logging

from pymongo import ASCENDING

from students import db
from students.errors import DuplicateError, ResourceNotFoundError, UserCausedError
from students.models.base import Document, isoformat, object_ids_to_json, utcnow
from students.models.queue import Queue
from students.models.user import User
from students.validation import to_object_id

logger = logging.getLogger(__name__)

MAX_MEMBERS = 100
MAX_QUEUES = 20


class Group(Document):
    collection = staticmethod(db.groups)
    not_found_message = "Group was not found"

    @property
    def name(self):
        return self.doc["name"]

    @property
    def creator(self):
        return self.doc["creator"]

    @property
    def members(self):
        return self.doc.setdefault("members", [])

    @property
    def queues(self):
        return self.doc.setdefault("queues", [])

    def is_member(self, user_id):
        return to_object_id(user_id) in self.members

    def is_creator(self, user_id):
        return to_object_id(user_id) == self.creator

    @classmethod
    def create_from_initial(cls, name, creator):
        creator = User.get(creator)
        doc = {
            "name": name,
            "creator": creator.id,
            "members": [],
            "queues": [],
            "createdAt": utcnow(),
        }
        with db.transaction() as session:
            db.acknowledged(cls.collection().insert_one(doc, session=session))
            group = cls(doc)
            group._push_member(creator.id, session)

        logger.info("User %s created group %s", creator.id, group.id)
        return group

    @classmethod
    def find_for_user(cls, user_id):
        docs = cls.collection().find({"members": to_object_id(user_id)})
        return [cls(doc) for doc in docs.sort("createdAt", ASCENDING)]

    def show_users(self):
        return User.find_many(self.members)

    def show_queues_perspective(self, user_id):
        return [queue.to_perspective_form(user_id) for queue in Queue.find_many(self.queues)]

    def update_name(self, name):
        db.acknowledged(
            self.collection().update_one({"_id": self.id}, {"$set": {"name": name}})
        )
        self.doc["name"] = name

    def add_member_with_id(self, user_id):
        self._add_member(User.get(user_id))

    def add_member_with_email(self, email):
        user = User.find_by_email(email)
        if user is None:
            raise ResourceNotFoundError("User was not found")
        self._add_member(user)

    def _add_member(self, user):
        if user.id in self.members:
            raise DuplicateError("User is already a member of the group")
        if len(self.members) >= MAX_MEMBERS:
            raise UserCausedError(f"Group members exceed maximum size ({MAX_MEMBERS})")

        with db.transaction() as session:
            self._push_member(user.id, session)

    def _push_member(self, user_id, session):
        # duplicate and size checks hold against the stored document
        group_filter = {
            "_id": self.id,
            "members": {"$ne": user_id},
            f"members.{MAX_MEMBERS - 1}": {"$exists": False},
        }
        result = db.acknowledged(
            self.collection().update_one(
                group_filter, {"$push": {"members": user_id}}, session=session
            )
        )
        if result.matched_count == 0:
            current = self.collection().find_one({"_id": self.id}, session=session) or {}
            if user_id in current.get("members", []):
                raise DuplicateError("User is already a member of the group")
            raise UserCausedError(f"Group members exceed maximum size ({MAX_MEMBERS})")

        db.acknowledged(
            User.collection().update_one(
                {"_id": user_id}, {"$addToSet": {"groups": self.id}}, session=session
            )
        )
        self.members.append(user_id)

    def delete_member(self, user_id):
        user_id = to_object_id(user_id)
        if user_id == self.creator:
            raise UserCausedError("Group creator cannot be removed")
        if user_id not in self.members:
            raise ResourceNotFoundError("User is not a member of the group")

        with db.transaction() as session:
            db.acknowledged(
                self.collection().update_one(
                    {"_id": self.id}, {"$pull": {"members": user_id}}, session=session
                )
            )
            db.acknowledged(
                User.collection().update_one(
                    {"_id": user_id}, {"$pull": {"groups": self.id}}, session=session
                )
            )
            db.acknowledged(
                Queue.collection().update_many(
                    {"_id": {"$in": self.queues}},
                    {"$pull": {"members": {"userId": user_id}}},
                    session=session,
                )
            )
        self.members.remove(user_id)

    def create_queue(self, name):
        if len(self.queues) >= MAX_QUEUES:
            raise UserCausedError(f"Group queues exceed maximum size ({MAX_QUEUES})")

        with db.transaction() as session:
            queue = Queue.insert(name, session=session)
            db.acknowledged(
                self.collection().update_one(
                    {"_id": self.id}, {"$push": {"queues": queue.id}}, session=session
                )
            )
        self.queues.append(queue.id)
        return queue

    def delete_queue(self, queue_id):
        queue_id = to_object_id(queue_id)
        if queue_id not in self.queues:
            raise UserCausedError("Queue was not found in group.")

        with db.transaction() as session:
            db.acknowledged(
                self.collection().update_one(
                    {"_id": self.id}, {"$pull": {"queues": queue_id}}, session=session
                )
            )
            db.acknowledged(Queue.collection().delete_one({"_id": queue_id}, session=session))
        self.queues.remove(queue_id)

    def delete_properly(self):
        with db.transaction() as session:
            db.acknowledged(
                Queue.collection().delete_many({"_id": {"$in": self.queues}}, session=session)
            )
            db.acknowledged(
                User.collection().update_many(
                    {"_id": {"$in": self.members}},
                    {"$pull": {"groups": self.id}},
                    session=session,
                )
            )
            db.acknowledged(self.collection().delete_one({"_id": self.id}, session=session))
        logger.info("Deleted group %s", self.id)

    def to_json(self):
        return {
            "id": str(self.id),
            "name": self.name,
            "creator": str(self.creator),
            "members": object_ids_to_json(self.members),
            "queues": object_ids_to_json(self.queues),
            "createdAt": isoformat(self.doc.get("createdAt")),
        }
