from typing import Any, Dict, Optional
from fastapi import APIRouter, Body, Depends, Header, Query

from weekplan.api.services import Services, get_services
from weekplan.utilities.validators import AddMealInput, parse_payload

router = APIRouter(prefix="/api/plans/{plan_id}/meals")


@router.post("", status_code=201)
def add_meal(plan_id: str, body: Dict[str, Any] = Body(default={}),
             user_id: str = Header(..., alias="X-User-Id"),
             services: Services = Depends(get_services)):
    data = parse_payload(AddMealInput, body)
    meal = services.lifecycle.add_meal(plan_id, user_id, data.day_of_week, data.meal_type, data.recipe_id)
    return {"status": "success", "data": {"meal": meal.to_dict()}}


@router.delete("/{meal_id}")
def remove_meal(plan_id: str, meal_id: str, skip_reason: Optional[str] = Query(default=None),
                user_id: str = Header(..., alias="X-User-Id"),
                services: Services = Depends(get_services)):
    """Skip the meal; the slot stays in the plan."""
    result = services.lifecycle.remove_meal(plan_id, meal_id, user_id, skip_reason)
    return {"status": "success", "skipped": result["skipped"], "message": result["message"],
            "data": {"meal": result["meal"].to_dict()}}


@router.post("/{meal_id}/restore")
def restore_meal(plan_id: str, meal_id: str, user_id: str = Header(..., alias="X-User-Id"),
                 services: Services = Depends(get_services)):
    meal = services.lifecycle.restore_meal(plan_id, meal_id, user_id)
    return {"status": "success", "message": "Meal restored successfully", "data": {"meal": meal.to_dict()}}


@router.get("/{meal_id}/comments")
def list_comments(plan_id: str, meal_id: str, user_id: str = Header(..., alias="X-User-Id"),
                  services: Services = Depends(get_services)):
    comments = services.lifecycle.list_comments(plan_id, meal_id, user_id)
    return {"status": "success", "data": {"comments": [c.to_dict() for c in comments], "count": len(comments)}}


@router.post("/{meal_id}/comments", status_code=201)
def add_comment(plan_id: str, meal_id: str, body: Dict[str, Any] = Body(default={}),
                user_id: str = Header(..., alias="X-User-Id"),
                services: Services = Depends(get_services)):
    comment = services.lifecycle.add_comment(plan_id, meal_id, user_id, body.get("content"))
    return {"status": "success", "data": {"comment": comment.to_dict()}}


@router.delete("/{meal_id}/comments/{comment_id}")
def delete_comment(plan_id: str, meal_id: str, comment_id: str,
                   user_id: str = Header(..., alias="X-User-Id"),
                   services: Services = Depends(get_services)):
    services.lifecycle.delete_comment(plan_id, meal_id, comment_id, user_id)
    return {"status": "success", "message": "Comment deleted"}


# Generic operation route last so the fixed paths above match first
@router.post("/{meal_id}/{operation}")
def mutate_meal(plan_id: str, meal_id: str, operation: str, body: Dict[str, Any] = Body(default={}),
                user_id: str = Header(..., alias="X-User-Id"),
                services: Services = Depends(get_services)):
    """swap, adjustPortions, update, lock, addComponent, removeComponent,
    updateComponent, swapComponent, saveAsRecipe."""
    meal = services.lifecycle.mutate_meal(plan_id, meal_id, user_id, operation, body)
    return {"status": "success", "data": {"meal": meal.to_dict()}}
