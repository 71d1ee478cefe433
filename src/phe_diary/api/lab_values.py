"""Lab value endpoints."""

from fastapi import APIRouter, Depends

from phe_diary.api.dependencies import get_container, require_user
from phe_diary.api.schemas import KeyPath, LabValueIn, lab_value_out
from phe_diary.containers import AppContainer

router = APIRouter(prefix="/api/lab-values", tags=["lab-values"])


@router.get("")
def list_lab_values(
    user_id: str = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    values = container.lab_value_service.list_values(user_id)
    return {"success": True, "labValues": [lab_value_out(value) for value in values]}


@router.post("")
def create_lab_value(
    body: LabValueIn,
    user_id: str = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    value = container.lab_value_service.create_value(
        user_id, body.date, body.phe, body.tyrosine
    )
    return {"success": True, "key": value.key}


@router.put("/{key}")
def update_lab_value(
    key: KeyPath,
    body: LabValueIn,
    user_id: str = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    container.lab_value_service.update_value(
        user_id, key, body.date, body.phe, body.tyrosine
    )
    return {"success": True, "key": key}


@router.delete("/{key}")
def delete_lab_value(
    key: KeyPath,
    user_id: str = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    container.lab_value_service.delete_value(user_id, key)
    return {"success": True, "key": key}
