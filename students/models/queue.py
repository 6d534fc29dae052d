import logging
import random

from students import db
from students.errors import ResourceNotFoundError, ServerError, UserCausedError
from students.models.base import Document, isoformat, utcnow
from students.models.user import User
from students.validation import to_object_id

logger = logging.getLogger(__name__)

MAX_MEMBERS = 100


def find_nearest_ready_index(members):
    """Index of the first member with a truthy status, or -1."""
    for index, member in enumerate(members):
        if member.get("status"):
            return index
    return -1


def rotate(items, magnitude):
    return items[magnitude:] + items[:magnitude]


def member_to_json(member):
    return {"userId": str(member["userId"]), "status": bool(member.get("status"))}


class Queue(Document):
    collection = staticmethod(db.queues)
    not_found_message = "Queue was not found"

    @property
    def name(self):
        return self.doc["name"]

    @property
    def members(self):
        return self.doc.setdefault("members", [])

    @property
    def member_ids(self):
        return [member["userId"] for member in self.members]

    @classmethod
    def insert(cls, name, session=None):
        doc = {"name": name, "members": [], "createdAt": utcnow()}
        db.acknowledged(cls.collection().insert_one(doc, session=session))
        return cls(doc)

    def update_name(self, name):
        db.acknowledged(
            self.collection().update_one({"_id": self.id}, {"$set": {"name": name}})
        )
        self.doc["name"] = name

    def show_users(self):
        statuses = {member["userId"]: bool(member.get("status")) for member in self.members}
        users = User.find_many(self.member_ids)
        return [dict(user.to_json(), status=statuses[user.id]) for user in users]

    def show_group(self):
        from students.models.group import Group

        doc = Group.collection().find_one({"queues": self.id})
        if doc is None:
            raise ServerError("Queue does not belong to any group")
        return Group(doc)

    def show_member(self, user_id):
        user_id = to_object_id(user_id)
        for member in self.members:
            if member["userId"] == user_id:
                return member
        raise ResourceNotFoundError("Queue member was not found")

    def add_member(self, user_id, allowed_ids=None):
        """Append the user with a cleared status.

        Returns the new member, or None when the user is already queued.
        ``allowed_ids`` restricts who may join, usually the group members.
        """
        user = User.get(user_id)
        if allowed_ids is not None and user.id not in allowed_ids:
            raise UserCausedError("User is not a member of the group")
        if user.id in self.member_ids:
            return None
        if len(self.members) >= MAX_MEMBERS:
            raise UserCausedError(f"Queue members exceed maximum size ({MAX_MEMBERS})")

        member = {"userId": user.id, "status": False}
        queue_filter = {"_id": self.id, "members.userId": {"$ne": user.id}}
        result = db.acknowledged(
            self.collection().update_one(queue_filter, {"$push": {"members": member}})
        )
        if result.matched_count == 0:
            return None

        self.members.append(member)
        return member

    def delete_member(self, user_id):
        user_id = to_object_id(user_id)
        db.acknowledged(
            self.collection().update_one(
                {"_id": self.id}, {"$pull": {"members": {"userId": user_id}}}
            )
        )
        self.doc["members"] = [m for m in self.members if m["userId"] != user_id]

    def update_members(self, members):
        db.acknowledged(
            self.collection().update_one({"_id": self.id}, {"$set": {"members": members}})
        )
        self.doc["members"] = members

    def update_member_status(self, user_id, status):
        user_id = to_object_id(user_id)
        queue_filter = {"_id": self.id, "members.userId": user_id}
        result = db.acknowledged(
            self.collection().update_one(queue_filter, {"$set": {"members.$.status": status}})
        )
        if result.matched_count == 0:
            raise ResourceNotFoundError("Member was not found in the queue")

        for member in self.members:
            if member["userId"] == user_id:
                member["status"] = status

    def rotate_members(self):
        """Send everyone up to and including the first ready member to the tail.

        The ready member's status is cleared. Returns the new order, or None
        when nobody is ready and the queue is left untouched.
        """
        members = [dict(member) for member in self.members]
        index = find_nearest_ready_index(members)
        if index < 0:
            return None

        members[index]["status"] = False
        rotated = rotate(members, index + 1)
        self.update_members(rotated)
        logger.debug("Rotated queue %s by %d", self.id, index + 1)
        return rotated

    def shuffle_members(self):
        members = list(self.members)
        random.shuffle(members)
        self.update_members(members)
        return members

    def to_perspective_form(self, user_id):
        """Summary of the queue as seen by one user."""
        user_id = to_object_id(user_id)
        position = None
        status = None
        for index, member in enumerate(self.members, start=1):
            if member["userId"] == user_id:
                position = index
                status = bool(member.get("status"))
                break

        return {
            "id": str(self.id),
            "name": self.name,
            "createdAt": isoformat(self.doc.get("createdAt")),
            "size": len(self.members),
            "position": position,
            "status": status,
        }

    def to_json(self):
        return {
            "id": str(self.id),
            "name": self.name,
            "members": [member_to_json(member) for member in self.members],
            "createdAt": isoformat(self.doc.get("createdAt")),
        }
