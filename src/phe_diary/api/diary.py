"""Diary day and food-log item endpoints."""

from fastapi import APIRouter, Depends

from phe_diary.api.dependencies import get_container, require_user
from phe_diary.api.schemas import (
    AddFoodItemIn,
    CreateDayIn,
    DeleteFoodItemIn,
    KeyPath,
    UpdateDayIn,
    UpdateFoodItemIn,
    day_out,
)
from phe_diary.containers import AppContainer

router = APIRouter(prefix="/api/diary", tags=["diary"])


@router.get("/days")
def list_days(
    user_id: str = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Return the caller's diary days ordered by date."""
    days = container.diary_service.list_days(user_id)
    return {"success": True, "days": [day_out(day) for day in days]}


@router.post("/days")
def create_day(
    body: CreateDayIn,
    user_id: str = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Create a diary day from totals entered by hand."""
    day = container.diary_service.create_day(user_id, body.date, body.phe, body.kcal)
    return {"success": True, "key": day.key}


@router.put("/days/{key}")
def update_day(
    key: KeyPath,
    body: UpdateDayIn,
    user_id: str = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Change the date, totals or log of a diary day."""
    container.diary_service.update_day(
        user_id,
        key,
        phe=body.phe,
        kcal=body.kcal,
        day=body.date,
        log=[item.to_domain() for item in body.log] if body.log is not None else None,
    )
    return {"success": True, "key": key, "updated": True}


@router.delete("/days/{key}")
def delete_day(
    key: KeyPath,
    user_id: str = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    container.diary_service.delete_day(user_id, key)
    return {"success": True, "key": key}


@router.post("/food-items")
def add_food_item(
    body: AddFoodItemIn,
    user_id: str = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Log a food on a date, creating the diary day when needed."""
    result = container.diary_service.add_item(user_id, body.to_domain(), body.date)
    return {"success": True, "key": result.day.key, "updated": not result.created}


@router.put("/food-items/{key}")
def update_food_item(
    key: KeyPath,
    body: UpdateFoodItemIn,
    user_id: str = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    container.diary_service.update_item(
        user_id, key, body.log_index, body.entry.to_domain()
    )
    return {"success": True, "key": key}


@router.delete("/food-items/{key}")
def delete_food_item(
    key: KeyPath,
    body: DeleteFoodItemIn,
    user_id: str = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    container.diary_service.delete_item(user_id, key, body.log_index)
    return {"success": True, "key": key, "deletedLogIndex": body.log_index}
