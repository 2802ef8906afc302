"""
Service layer.

Services wire stores and engines together so interfaces only deal with one
object.
"""

from trashed.core.services.trash import TrashService

__all__ = ["TrashService"]
