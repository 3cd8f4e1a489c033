import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from quizly.core.logging_middleware import LoggingMiddleware
from quizly.db.init_db import init_db
from quizly.routers.admin_quizzes import router as admin_quizzes_router
from quizly.routers.auth import router as auth_router
from quizly.routers.exports import router as exports_router
from quizly.routers.profile import router as profile_router
from quizly.routers.quizzes import router as quizzes_router
from quizly.routers.submissions import router as submissions_router
from quizly.routers.users import router as users_router

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app = FastAPI(title="Quizly")

# Middleware
app.add_middleware(LoggingMiddleware)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={
            "success": False,
            "error": "Invalid request",
            "details": jsonable_encoder(exc.errors()),
        },
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={"success": False, "error": "Internal server error"},
    )


# Health check
@app.get("/health")
def health():
    return {"status": "ok"}


# Startup event
@app.on_event("startup")
def on_startup():
    init_db()


# Include routers
app.include_router(auth_router, prefix="/api/auth", tags=["auth"])
app.include_router(admin_quizzes_router, prefix="/api/quiz", tags=["admin"])
app.include_router(quizzes_router, prefix="/api/quiz", tags=["quizzes"])
app.include_router(submissions_router, prefix="/api/submissions", tags=["submissions"])
app.include_router(exports_router, prefix="/api", tags=["exports"])
app.include_router(users_router, prefix="/api/users", tags=["admin"])
app.include_router(profile_router, prefix="/api/user", tags=["profile"])
