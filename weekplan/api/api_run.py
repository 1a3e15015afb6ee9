from fastapi import FastAPI, Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
import logging

from weekplan.api.routes import families, meals, plans
from weekplan.utilities.config import configure_logging
from weekplan.utilities.exceptions import InvalidPayload, WeekPlanError

# Logging
configure_logging()
logger = logging.getLogger("weekplan_app")

# Initialize FastAPI app
app = FastAPI(title="Weekly Meal Plan API")

# Include routers
app.include_router(plans.router)
app.include_router(meals.router)
app.include_router(families.router)


@app.exception_handler(WeekPlanError)
async def _weekplan_error(request: Request, exc: WeekPlanError):
    """Map domain errors to their HTTP-equivalent status with a reason code."""
    if exc.status >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    else:
        logger.info("%s %s rejected (%s): %s", request.method, request.url.path, exc.code, exc.message)
    return JSONResponse(status_code=exc.status, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def _body_not_an_object(request: Request, exc: RequestValidationError):
    """Unparseable or non-object request bodies get the same error shape as payload errors."""
    errors = exc.errors()
    if errors and all(err["loc"] and err["loc"][0] == "body" for err in errors):
        return await _weekplan_error(request, InvalidPayload("; ".join(err["msg"] for err in errors)))
    return await request_validation_exception_handler(request, exc)


@app.get("/health")
def health():
    return {"status": "ok"}
