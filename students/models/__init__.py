from students.models.file import ArchiveFile
from students.models.group import Group
from students.models.queue import Queue
from students.models.user import User

__all__ = ["ArchiveFile", "Group", "Queue", "User"]
