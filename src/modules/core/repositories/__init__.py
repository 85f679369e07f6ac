"""Core repository abstractions."""

from modules.core.repositories.interfaces import IRepository, translate_backend_errors

__all__ = ["IRepository", "translate_backend_errors"]
