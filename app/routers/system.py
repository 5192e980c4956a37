import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from app.core.routing import ApiRoute

logger = logging.getLogger("app.system")

router = APIRouter(tags=["System"], route_class=ApiRoute)


@router.get("/")
def root(request: Request):
    try:
        result = request.app.state.database.ping()
    except SQLAlchemyError as exc:
        logger.error("database_ping_failed", extra={"error": str(exc)})
        return JSONResponse(
            {"error": "Database connection failed", "details": str(exc)},
            status_code=500,
        )
    return {"message": "Romofete API is running", "dbTest": {"result": result}}


@router.get("/health")
def health_check():
    return {"status": "ok"}
