from datetime import datetime
import os
import traceback

from fastapi import Depends, FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from dotenv import load_dotenv

load_dotenv()

from logging_config import logger, log_request_info, log_response_info
from db.init import get_db, init_db
from utils.errors import AppError, InternalError

from routers import (
    auth, service_types, requests, runs, staff, roles, teams,
    clients, branches, service_charges, notices, sos, logs,
)


origins = [
    "http://localhost:5173",   # dashboard dev server
    os.getenv("FRONTEND_URL"),
]


app = FastAPI(title="BM Branch API")


class LoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        log_request_info(request)
        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(f"Request failed: {str(e)}")
            logger.error(traceback.format_exc())
            raise
        log_response_info(request, response)
        return response


app.add_middleware(LoggingMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[o for o in origins if o],
    allow_origin_regex=r"^https://.*\.vercel\.app$",  # preview deployments
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)


# ---- error responses: always {"message": ..., "error"?: ...} ----
@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if isinstance(exc, InternalError):
        logger.error(f"Internal error on {request.url.path}: {exc.message} ({exc.error!r})")
        return JSONResponse(status_code=exc.status_code, content={"message": exc.message})
    return JSONResponse(status_code=exc.status_code, content=jsonable_encoder(exc.to_dict()))


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={"message": "Invalid request", "error": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(SQLAlchemyError)
async def database_exception_handler(request: Request, exc: SQLAlchemyError):
    logger.error(f"Database error on {request.url.path}: {str(exc)}")
    logger.error(traceback.format_exc())
    return JSONResponse(status_code=500, content={"message": "Internal server error"})


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception: {str(exc)}")
    logger.error(traceback.format_exc())
    return JSONResponse(status_code=500, content={"message": "Something went wrong!"})


@app.on_event("startup")
def startup():
    logger.info("Starting BM Branch API...")
    init_db()


@app.get("/")
def root():
    return {
        "message": "BM Branch API Server",
        "status": "running",
        "timestamp": datetime.utcnow().isoformat(),
    }


@app.get("/api/health")
def health_check():
    return {"status": "OK", "timestamp": datetime.utcnow().isoformat()}


@app.get("/api/test-db")
def test_db(db: Session = Depends(get_db)):
    try:
        result = db.execute(text("SELECT 1 + 1 AS solution")).scalar()
    except SQLAlchemyError as e:
        raise InternalError("Database connection failed", error=str(e)) from e
    return {"message": "Database connection successful", "solution": result}


# Routers
app.include_router(auth.router, prefix="/api/auth", tags=["Auth"])
app.include_router(service_types.router, prefix="/api/service-types", tags=["Service Types"])
app.include_router(requests.router, prefix="/api/requests", tags=["Requests"])
app.include_router(runs.router, prefix="/api/runs", tags=["Runs"])
app.include_router(staff.router, prefix="/api/staff", tags=["Staff"])
app.include_router(roles.router, prefix="/api/roles", tags=["Roles"])
app.include_router(teams.router, prefix="/api/teams", tags=["Teams"])
app.include_router(clients.router, prefix="/api/clients", tags=["Clients"])
app.include_router(service_charges.router, prefix="/api/clients", tags=["Service Charges"])
app.include_router(branches.router, prefix="/api/branches", tags=["Branches"])
app.include_router(notices.router, prefix="/api/notices", tags=["Notices"])
app.include_router(sos.router, prefix="/api/sos", tags=["SOS"])
app.include_router(logs.router, prefix="/api/logs", tags=["Logs"])


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=int(os.getenv("PORT", "5000")))
