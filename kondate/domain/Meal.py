"""Meal domain entity: a reusable catalog dish with the slots it suits and a free memo."""
from typing import List, Optional

from kondate.utilities.constants import SLOTS


class Meal:
    def __init__(self, name: str = "", categories: Optional[List[str]] = None, memo: str = "",
                 user_id: str = "", id: Optional[str] = None,
                 created_at: Optional[str] = None, updated_at: Optional[str] = None):
        self.id = id
        self.name = (name or "").strip()
        self.categories = [c for c in (categories or []) if c in SLOTS]
        self.memo = (memo or "").strip()
        self.user_id = user_id
        self.created_at = created_at
        self.updated_at = updated_at

    @staticmethod
    def from_dict(data, id: Optional[str] = None) -> "Meal":
        '''Creates a Meal from a stored document; older documents carry a single "category" string.'''
        d = dict(data) if isinstance(data, dict) else {}
        categories = d.get("categories")
        if not isinstance(categories, list):
            categories = [d["category"]] if d.get("category") else []
        return Meal(
            name=d.get("name", ""),
            categories=categories,
            memo=d.get("memo", ""),
            user_id=d.get("userId", ""),
            id=id or d.get("id"),
            created_at=d.get("createdAt"),
            updated_at=d.get("updatedAt"),
        )

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "categories": list(self.categories),
            "memo": self.memo,
            "userId": self.user_id,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    def __str__(self) -> str:
        return f"{self.name} - {', '.join(self.categories)}"

    __repr__ = __str__
