"""Session backends.

MemorySessionBackend keeps sessions in a TTL cache in this process;
SQLiteSessionBackend persists them to disk so pending links survive a
restart and can be shared by workers on one host.
"""

from hsu.providers.session.memory_backend import MemorySessionBackend
from hsu.providers.session.sqlite_backend import SQLiteSessionBackend

__all__ = ["MemorySessionBackend", "SQLiteSessionBackend"]
