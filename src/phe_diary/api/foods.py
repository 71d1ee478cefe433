"""Own food and community food endpoints."""

from fastapi import APIRouter, Depends, Query

from phe_diary.api.dependencies import get_container, require_user
from phe_diary.api.schemas import (
    KeyPath,
    Language,
    OwnFoodSaveIn,
    OwnFoodUpdateIn,
    VoteIn,
    community_food_out,
    own_food_out,
)
from phe_diary.containers import AppContainer

own_food_router = APIRouter(prefix="/api/own-food", tags=["own-food"])
community_router = APIRouter(prefix="/api/community-food", tags=["community-food"])


@own_food_router.get("")
def list_own_food(
    user_id: str = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    foods = container.own_food_service.list_foods(user_id)
    return {"success": True, "ownFood": [own_food_out(food) for food in foods]}


@own_food_router.post("")
def create_own_food(
    body: OwnFoodSaveIn,
    user_id: str = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Save a custom food, sharing it with the community when flagged."""
    food = container.own_food_service.create_food(
        user_id, body.details(), shared=body.shared, language=body.locale
    )
    return {"success": True, "key": food.key, "communityKey": food.community_key}


@own_food_router.put("/{key}")
def update_own_food(
    key: KeyPath,
    body: OwnFoodUpdateIn,
    user_id: str = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    food = container.own_food_service.update_food(
        user_id,
        key,
        body.data.details(),
        shared=body.data.shared,
        language=body.locale,
    )
    return {"success": True, "key": key, "communityKey": food.community_key}


@own_food_router.delete("/{key}")
def delete_own_food(
    key: KeyPath,
    user_id: str = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    container.own_food_service.delete_food(user_id, key)
    return {"success": True, "key": key}


@community_router.get("")
def list_community_food(
    language: Language | None = None,
    include_hidden: bool = Query(default=False, alias="includeHidden"),
    user_id: str = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """List community foods, best rated first."""
    foods = container.community_service.list_foods(language, include_hidden)
    return {
        "success": True,
        "communityFoods": [community_food_out(food, user_id) for food in foods],
    }


@community_router.post("/vote")
def vote(
    body: VoteIn,
    user_id: str = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Like or dislike a community food; repeating a vote withdraws it."""
    tally = container.community_service.vote(user_id, body.community_food_key, body.vote)
    return {
        "success": True,
        "likes": tally.likes,
        "dislikes": tally.dislikes,
        "score": tally.score,
        "hidden": tally.hidden,
    }
