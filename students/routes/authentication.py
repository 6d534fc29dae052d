from flask import Blueprint, jsonify, make_response

from students.auth import clear_token_cookie, issue_token, set_token_cookie
from students.models import User
from students.validation import Validator, request_data

bp = Blueprint("authentication", __name__)


@bp.route("/register", methods=["POST"])
def register():
    validator = Validator(request_data())
    email = validator.email()
    name = validator.person_name()
    password = validator.password()
    validator.check()

    user = User.create(email, name, password)
    response = jsonify(user.to_json())
    return set_token_cookie(response, issue_token(user.id)), 200


@bp.route("/authenticate", methods=["POST"])
def authenticate():
    validator = Validator(request_data())
    email = validator.email()
    password = validator.password()
    validator.check()

    user = User.authenticate(email, password)
    token = issue_token(user.id)
    response = jsonify(token=token, message="Logged in successfully!")
    return set_token_cookie(response, token), 200


@bp.route("/logout", methods=["POST"])
def logout():
    return clear_token_cookie(make_response("", 204))
