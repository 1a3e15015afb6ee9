from typing import Any, Dict, Optional
from fastapi import APIRouter, Body, Depends, Header, Query

from weekplan.api.services import Services, get_services
from weekplan.utilities.exceptions import Unauthorized
from weekplan.utilities.validators import GenerateInput, parse_payload

router = APIRouter(prefix="/api")


@router.post("/families/{family_id}/plans/generate", status_code=201)
def generate_plan(family_id: str, body: Dict[str, Any] = Body(default={}),
                  user_id: str = Header(..., alias="X-User-Id"),
                  services: Services = Depends(get_services)):
    """Generate a DRAFT plan in AUTO or EXPRESS mode."""
    data = parse_payload(GenerateInput, body)
    result = services.generator.generate(data.mode, family_id, data.week_start_date,
                                         template_id=data.template_id, acting_user_id=user_id)
    return {"status": "success", "data": result.to_dict()}


@router.get("/families/{family_id}/plans")
def list_plans(family_id: str, user_id: str = Header(..., alias="X-User-Id"),
               services: Services = Depends(get_services)):
    if services.families.resolve_member(family_id, user_id) is None:
        raise Unauthorized("You are not a member of this family")
    plans = services.plans.list_plans(family_id)
    return {"status": "success", "data": {"plans": [p.to_dict() for p in plans], "count": len(plans)}}


@router.get("/plans/{plan_id}")
def get_plan(plan_id: str, user_id: str = Header(..., alias="X-User-Id"),
             services: Services = Depends(get_services)):
    plan = services.lifecycle.get_plan(plan_id, user_id)
    return {"status": "success", "data": {"plan": plan.to_dict()}}


@router.post("/plans/{plan_id}/validate")
def validate_plan(plan_id: str, user_id: str = Header(..., alias="X-User-Id"),
                  services: Services = Depends(get_services)):
    plan = services.lifecycle.validate_plan(plan_id, user_id)
    return {"status": "success", "data": {"plan": plan.to_dict()}}


@router.post("/plans/{plan_id}/lock")
def lock_plan(plan_id: str, user_id: str = Header(..., alias="X-User-Id"),
              services: Services = Depends(get_services)):
    plan = services.lifecycle.lock_plan(plan_id, user_id)
    return {"status": "success", "data": {"plan": plan.to_dict()}}


@router.put("/plans/{plan_id}/cutoff")
def set_cutoff(plan_id: str, body: Dict[str, Any] = Body(...),
               user_id: str = Header(..., alias="X-User-Id"),
               services: Services = Depends(get_services)):
    plan = services.lifecycle.set_cutoff(plan_id, user_id, body)
    return {"status": "success", "data": {"plan": plan.to_dict()}}


@router.post("/plans/{plan_id}/template")
def switch_template(plan_id: str, template_id: str = Body(..., embed=True),
                    user_id: str = Header(..., alias="X-User-Id"),
                    services: Services = Depends(get_services)):
    plan, summary = services.lifecycle.switch_template(plan_id, user_id, template_id)
    return {"status": "success", "data": {"plan": plan.to_dict(), "summary": summary.to_dict()}}


@router.get("/plans/{plan_id}/audit-log")
def audit_log(plan_id: str, since: Optional[int] = Query(default=None),
              user_id: str = Header(..., alias="X-User-Id"),
              services: Services = Depends(get_services)):
    return {"status": "success", "data": services.lifecycle.read_audit_log(plan_id, user_id, since)}
