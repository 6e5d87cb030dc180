"""
Hierarchical cache keys for API consumers.

Keys are tuples so that a shorter key is a prefix of every key under it:
invalidating ("app", "content", "list") drops every cached content page
regardless of its filters.
"""

from typing import Any, Dict, Optional, Tuple

ROOT = ("app",)

LIST_FILTER_FIELDS = ("sort_by", "sort_order", "search", "first", "after")


class _ResourceKeys:

    def __init__(self, name: str):
        self.name = name

    def all(self) -> Tuple:
        return ROOT + (self.name,)

    def lists(self) -> Tuple:
        return self.all() + ("list",)

    def details(self) -> Tuple:
        return self.all() + ("detail",)

    def detail(self, resource_id: Any) -> Tuple:
        return self.details() + (str(resource_id),)


class ContentKeys(_ResourceKeys):

    def __init__(self):
        super().__init__("content")

    def list(self, filters: Optional[Dict[str, Any]] = None) -> Tuple:
        """Key for one filtered page; unset filters are left out."""
        filters = filters or {}
        identity = tuple(
            (field, filters[field])
            for field in LIST_FILTER_FIELDS
            if filters.get(field) is not None
        )
        return self.lists() + (identity,)


class UserKeys(_ResourceKeys):

    def __init__(self):
        super().__init__("users")

    def list(self) -> Tuple:
        return self.lists()


content = ContentKeys()
users = UserKeys()
