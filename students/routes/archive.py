from flask import Blueprint, current_app, jsonify, request, send_file

from students.auth import login_required
from students.errors import LimitError, UserCausedError
from students.models import ArchiveFile

bp = Blueprint("archive", __name__)


@bp.route("/files", methods=["GET"])
@login_required
def show():
    return jsonify([file.to_json() for file in ArchiveFile.find_all()])


@bp.route("/files", methods=["POST"])
@login_required
def upload_files():
    if not request.mimetype.startswith("multipart/"):
        raise UserCausedError("Invalid files")

    unexpected = [
        field
        for field, upload in request.files.items(multi=True)
        if field != "files" and upload.filename
    ]
    if unexpected:
        raise LimitError(f"Unexpected file field: {unexpected[0]}")

    uploads = [upload for upload in request.files.getlist("files") if upload.filename]
    limit = current_app.config["FILES_UPLOAD_LIMIT"]
    if len(uploads) > limit:
        raise LimitError(f"Files limit: {limit}")
    if not uploads:
        return "", 204

    files = [ArchiveFile.upload(upload) for upload in uploads]
    return jsonify([file.to_json() for file in files]), 201


@bp.route("/files/<file_id>", methods=["GET"])
@login_required
def download_file(file_id):
    file = ArchiveFile.get(file_id)
    return send_file(
        file.open_download_stream(),
        mimetype=file.content_type,
        as_attachment=True,
        download_name=file.filename,
    )


@bp.route("/files/<file_id>", methods=["DELETE"])
@login_required
def delete_file(file_id):
    ArchiveFile.delete_by_id(file_id)
    return "", 204
