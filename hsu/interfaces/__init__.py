"""Interface definitions for pluggable collaborators.

    Interface        →  Concrete implementations (in hsu/providers/)
    ────────────────────────────────────────────────────────────────
    ISessionBackend  →  MemorySessionBackend, SQLiteSessionBackend
"""

from hsu.interfaces.session_backend import ISessionBackend

__all__ = ["ISessionBackend"]
