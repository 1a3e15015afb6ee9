from typing import Any, Dict
from fastapi import APIRouter, Body, Depends, Header

from weekplan.api.services import Services, get_services
from weekplan.logic.lifecycle.permissions import can_edit_plan
from weekplan.utilities.exceptions import Unauthorized

router = APIRouter(prefix="/api/families/{family_id}")


def _require_manager(services: Services, family_id: str, user_id: str):
    member = services.families.resolve_member(family_id, user_id)
    if member is None:
        raise Unauthorized("You are not a member of this family")
    if not can_edit_plan(member.role):
        raise Unauthorized("Only family administrators and parents can change family settings")
    return member


@router.get("/templates")
def list_templates(family_id: str, user_id: str = Header(..., alias="X-User-Id"),
                   services: Services = Depends(get_services)):
    if services.families.resolve_member(family_id, user_id) is None:
        raise Unauthorized("You are not a member of this family")
    templates = services.families.list_templates(family_id)
    return {"status": "success", "data": {"templates": [t.to_dict() for t in templates]}}


@router.post("/templates", status_code=201)
def create_template(family_id: str, body: Dict[str, Any] = Body(...),
                    user_id: str = Header(..., alias="X-User-Id"),
                    services: Services = Depends(get_services)):
    _require_manager(services, family_id, user_id)
    template = services.families.create_template(family_id, body)
    return {"status": "success", "data": {"template": template.to_dict()}}


@router.put("/diet-profile")
def update_diet_profile(family_id: str, body: Dict[str, Any] = Body(...),
                        user_id: str = Header(..., alias="X-User-Id"),
                        services: Services = Depends(get_services)):
    _require_manager(services, family_id, user_id)
    family = services.families.update_diet_profile(family_id, body)
    return {"status": "success", "data": {"diet_profile": family.diet_profile.to_dict()}}
