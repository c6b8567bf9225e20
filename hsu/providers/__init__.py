"""Concrete adapters for the interfaces in ``hsu.interfaces``."""
