"""Category endpoints."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, status

from ...auth import UserScope
from ...services.categories import CategoryService
from ..dependencies import get_database, get_user_scope
from ..schemas import CategoryCreateRequest, CategoryResponse

router = APIRouter()


@router.get("/categories", response_model=List[CategoryResponse], status_code=status.HTTP_200_OK)
def list_categories(scope: UserScope = Depends(get_user_scope), db=Depends(get_database)) -> List[CategoryResponse]:
    return [CategoryResponse(**item.to_dict()) for item in CategoryService(db, scope).list_categories()]


@router.post("/categories", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
def create_category(
    payload: CategoryCreateRequest,
    scope: UserScope = Depends(get_user_scope),
    db=Depends(get_database),
) -> CategoryResponse:
    category = CategoryService(db, scope).create_category(payload.name, payload.color)
    return CategoryResponse(**category.to_dict())


@router.delete("/categories/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_category(
    category_id: str,
    scope: UserScope = Depends(get_user_scope),
    db=Depends(get_database),
) -> None:
    CategoryService(db, scope).delete_category(category_id)
