"""Students: group queues and a shared file archive over MongoDB."""

__version__ = "0.1.0"
