from flask import Blueprint, g, jsonify, request

from students.auth import login_required, require_member
from students.errors import UserCausedError
from students.models import Queue, User

bp = Blueprint("users", __name__)


@bp.route("/users/me", methods=["GET"])
@login_required
def show_me():
    return jsonify(User.get(g.user_id).to_json())


# GET /api/users?queueId=<queueId>
@bp.route("/users", methods=["GET"])
@login_required
def find_in_queue():
    queue_id = request.args.get("queueId")
    if not queue_id:
        raise UserCausedError("queueId is required")

    queue = Queue.get(queue_id)
    require_member(queue.show_group())
    users = User.find_in_queue(queue.id)
    return jsonify([user.to_json() for user in users])
