import logging
import mimetypes
import re

from gridfs.errors import NoFile

from students.errors import ResourceNotFoundError
from students.models.base import isoformat
from students.storage import get_archive
from students.validation import to_object_id

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"

# first match wins, the catch-all maps to the generic icon
FILE_TYPE_PATTERNS = [
    (re.compile(r"image"), "image"),
    (re.compile(r"video"), "video"),
    (re.compile(r"audio/"), "audio"),
    (re.compile(r"(?:(?:ms-?)word)|(?:word(?:processing))"), "word"),
    (re.compile(r"excel"), "excel"),
    (re.compile(r"open(?:office|doc)"), "openoffice"),
    (re.compile(r"pdf"), "pdf"),
    (re.compile(r"rar|[/b]zip|compress"), "archive"),
    (re.compile(r".*"), ""),
]


def guess_content_type(filename):
    content_type, _ = mimetypes.guess_type(filename or "")
    return content_type or DEFAULT_CONTENT_TYPE


def file_type(content_type):
    for pattern, general_type in FILE_TYPE_PATTERNS:
        if pattern.search(content_type or ""):
            return general_type
    return ""


class ArchiveFile:
    def __init__(self, doc):
        self.doc = doc

    @property
    def id(self):
        return self.doc["_id"]

    @property
    def filename(self):
        return self.doc["filename"]

    @property
    def content_type(self):
        metadata = self.doc.get("metadata") or {}
        return metadata.get("contentType") or guess_content_type(self.filename)

    @classmethod
    def find_all(cls):
        return [cls(doc) for doc in get_archive().list_files()]

    @classmethod
    def get(cls, file_id):
        doc = get_archive().find_file(to_object_id(file_id))
        if doc is None:
            raise ResourceNotFoundError("File was not found")
        return cls(doc)

    @classmethod
    def upload(cls, file_storage):
        """Store a werkzeug ``FileStorage`` and return the new file."""
        content_type = file_storage.mimetype or guess_content_type(file_storage.filename)
        archive = get_archive()
        file_id = archive.upload(file_storage.filename, file_storage.stream, content_type)
        logger.info("File uploaded: %s (%s)", file_storage.filename, file_id)
        return cls(archive.find_file(file_id))

    @classmethod
    def delete_by_id(cls, file_id):
        file_id = to_object_id(file_id)
        try:
            get_archive().delete(file_id)
        except NoFile:
            logger.info("File %s is already gone", file_id)

    def open_download_stream(self):
        return get_archive().open_download_stream(self.id)

    def file_type(self):
        return file_type(self.content_type)

    def to_json(self):
        return {
            "id": str(self.id),
            "filename": self.filename,
            "contentType": self.content_type,
            "length": self.doc.get("length"),
            "chunkSize": self.doc.get("chunkSize"),
            "uploadDate": isoformat(self.doc.get("uploadDate")),
            "fileType": self.file_type(),
        }
