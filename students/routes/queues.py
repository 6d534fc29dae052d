from flask import Blueprint, g, jsonify

from students.auth import login_required, require_member, require_self_or_creator
from students.models import Queue
from students.models.queue import member_to_json
from students.validation import Validator, request_data

bp = Blueprint("queues", __name__)

# stands in for the caller's own id in member routes
ME = "me"


def _member_id(user_id):
    return g.user_id if user_id == ME else user_id


def _load(queue_id):
    """Fetch the queue and its group, checking the caller belongs to it."""
    queue = Queue.get(queue_id)
    group = queue.show_group()
    require_member(group)
    return queue, group


@bp.route("/queues/<queue_id>", methods=["GET"])
@login_required
def show(queue_id):
    queue, _ = _load(queue_id)
    return jsonify(queue.to_json())


@bp.route("/queues/<queue_id>", methods=["PATCH"])
@login_required
def update_name(queue_id):
    validator = Validator(request_data())
    name = validator.text("name")
    validator.check()

    queue, _ = _load(queue_id)
    queue.update_name(name)
    return jsonify(queue.to_json())


@bp.route("/queues/<queue_id>/members", methods=["GET"])
@login_required
def show_users(queue_id):
    queue, _ = _load(queue_id)
    return jsonify(queue.show_users())


@bp.route("/queues/<queue_id>/group", methods=["GET"])
@login_required
def show_group(queue_id):
    _, group = _load(queue_id)
    return jsonify(group.to_json())


@bp.route("/queues/<queue_id>/members/shuffle", methods=["POST"])
@login_required
def shuffle_members(queue_id):
    queue, _ = _load(queue_id)
    members = queue.shuffle_members()
    return jsonify([member_to_json(member) for member in members])


@bp.route("/queues/<queue_id>/members/rotate", methods=["POST"])
@login_required
def rotate_members(queue_id):
    queue, _ = _load(queue_id)
    members = queue.rotate_members()
    if members is None:
        return "", 204
    return jsonify([member_to_json(member) for member in members])


@bp.route("/queues/<queue_id>/members/<user_id>", methods=["GET"])
@login_required
def show_member(queue_id, user_id):
    queue, _ = _load(queue_id)
    return jsonify(member_to_json(queue.show_member(_member_id(user_id))))


@bp.route("/queues/<queue_id>/members/<user_id>", methods=["PUT"])
@login_required
def add_member(queue_id, user_id):
    queue, group = _load(queue_id)
    member = queue.add_member(_member_id(user_id), allowed_ids=group.members)
    if member is None:
        return "", 204
    return jsonify(member_to_json(member)), 200


@bp.route("/queues/<queue_id>/members/<user_id>", methods=["PATCH"])
@login_required
def set_member_status(queue_id, user_id):
    validator = Validator(request_data())
    status = validator.boolean("status")
    validator.check()

    user_id = _member_id(user_id)
    queue, group = _load(queue_id)
    require_self_or_creator(group, user_id)
    queue.update_member_status(user_id, status)
    return jsonify(id=str(user_id), status=status)


@bp.route("/queues/<queue_id>/members/<user_id>", methods=["DELETE"])
@login_required
def delete_member(queue_id, user_id):
    user_id = _member_id(user_id)
    queue, group = _load(queue_id)
    require_self_or_creator(group, user_id)
    queue.delete_member(user_id)
    return "", 204
