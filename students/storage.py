"""GridFS-backed blob storage for the shared archive."""

from flask import current_app
from gridfs import GridFSBucket
from pymongo import DESCENDING

from students.db import mongo


class ArchiveStorage:
    """Files live in ``<bucket>.files`` / ``<bucket>.chunks``."""

    def __init__(self, database, bucket_name):
        self.bucket = GridFSBucket(database, bucket_name=bucket_name)
        self.files = database[f"{bucket_name}.files"]

    def list_files(self):
        return list(self.files.find({}).sort("uploadDate", DESCENDING))

    def find_file(self, file_id):
        return self.files.find_one({"_id": file_id})

    def upload(self, filename, stream, content_type):
        return self.bucket.upload_from_stream(
            filename, stream, metadata={"contentType": content_type}
        )

    def open_download_stream(self, file_id):
        return self.bucket.open_download_stream(file_id)

    def delete(self, file_id):
        self.bucket.delete(file_id)


def get_archive():
    archive = current_app.extensions.get("archive")
    if archive is None:
        archive = ArchiveStorage(mongo.db, current_app.config["ARCHIVE_COLLECTION_NAME"])
        current_app.extensions["archive"] = archive
    return archive
