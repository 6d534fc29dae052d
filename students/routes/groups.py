from flask import Blueprint, g, jsonify

from students.auth import login_required, require_creator, require_member, require_self_or_creator
from students.errors import UserCausedError
from students.models import Group
from students.validation import Validator, request_data

bp = Blueprint("groups", __name__)


def _name_from_body():
    validator = Validator(request_data())
    name = validator.text("name")
    validator.check()
    return name


def _member_group(group_id):
    group = Group.get(group_id)
    require_member(group)
    return group


@bp.route("/groups", methods=["GET"])
@login_required
def show_mine():
    return jsonify([group.to_json() for group in Group.find_for_user(g.user_id)])


@bp.route("/groups", methods=["POST"])
@login_required
def create():
    group = Group.create_from_initial(_name_from_body(), g.user_id)
    return jsonify(group.to_json()), 200


@bp.route("/groups/<group_id>", methods=["GET"])
@login_required
def show(group_id):
    return jsonify(_member_group(group_id).to_json())


@bp.route("/groups/<group_id>", methods=["PATCH"])
@login_required
def update_name(group_id):
    group = Group.get(group_id)
    require_creator(group)
    group.update_name(_name_from_body())
    return jsonify(group.to_json())


@bp.route("/groups/<group_id>", methods=["DELETE"])
@login_required
def delete(group_id):
    group = Group.get(group_id)
    require_creator(group)
    group.delete_properly()
    return "", 204


@bp.route("/groups/<group_id>/members", methods=["GET"])
@login_required
def show_users(group_id):
    users = _member_group(group_id).show_users()
    return jsonify([user.to_json() for user in users])


@bp.route("/groups/<group_id>/queues/perspective/<user_id>", methods=["GET"])
@login_required
def show_queues_perspective(group_id, user_id):
    group = _member_group(group_id)
    if not group.is_member(user_id):
        raise UserCausedError("User is not a member of the group")
    return jsonify(group.show_queues_perspective(user_id))


@bp.route("/groups/<group_id>/members/email", methods=["PUT"])
@login_required
def add_member_with_email(group_id):
    validator = Validator(request_data())
    email = validator.email()
    validator.check()

    _member_group(group_id).add_member_with_email(email)
    return "", 204


@bp.route("/groups/<group_id>/members/<user_id>", methods=["PUT"])
@login_required
def add_member_with_id(group_id, user_id):
    _member_group(group_id).add_member_with_id(user_id)
    return "", 204


@bp.route("/groups/<group_id>/members/<user_id>", methods=["DELETE"])
@login_required
def delete_member(group_id, user_id):
    group = Group.get(group_id)
    require_self_or_creator(group, user_id)
    group.delete_member(user_id)
    return "", 204


@bp.route("/groups/<group_id>/queues", methods=["POST"])
@login_required
def create_queue(group_id):
    name = _name_from_body()
    queue = _member_group(group_id).create_queue(name)
    return jsonify(queue.to_json()), 200


@bp.route("/groups/<group_id>/queues/<queue_id>", methods=["DELETE"])
@login_required
def delete_queue(group_id, queue_id):
    group = Group.get(group_id)
    require_creator(group)
    group.delete_queue(queue_id)
    return "", 204
