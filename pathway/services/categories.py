"""User-defined task categories."""

from __future__ import annotations

import re
from typing import Any, List, Optional

from ..auth.session import UserScope
from ..db.models import Category
from ..errors import EntitlementError, NotFoundError, RemoteError, ValidationError

DEFAULT_CATEGORY_COLOR = "#8B5CF6"
_HEX_COLOR = re.compile(r"^#[0-9A-Fa-f]{6}$")


class CategoryService:
    def __init__(self, db: Any, scope: UserScope) -> None:
        self.db = db
        self.scope = scope

    def list_categories(self) -> List[Category]:
        return [Category.from_record(row) for row in self.db.list_categories(self.scope.user_id)]

    def create_category(self, name: Optional[str], color: Optional[str] = None) -> Category:
        cleaned = (name or "").strip()
        if not cleaned:
            raise ValidationError("Please enter a category name.")
        color = (color or "").strip() or DEFAULT_CATEGORY_COLOR
        if not _HEX_COLOR.match(color):
            raise ValidationError("Color must be a hex value like #8B5CF6.")

        limit = self.scope.entitlements.category_limit
        if len(self.db.list_categories(self.scope.user_id)) >= limit:
            raise EntitlementError(f"You can create up to {limit} categories.", title="Category limit reached")

        record = self.db.create_category(self.scope.user_id, name=cleaned, color=color)
        if not record:
            raise RemoteError("Failed to create category", operation="create_category")
        return Category.from_record(record)

    def delete_category(self, category_id: str) -> None:
        # Tasks keep their category label; the reference is not enforced.
        if not self.db.delete_category(category_id, self.scope.user_id):
            raise NotFoundError("Category not found")


__all__ = ["CategoryService", "DEFAULT_CATEGORY_COLOR"]
