import logging
from datetime import datetime, timezone

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import RedirectResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from taskboard.config import settings, SecurityConfig
from taskboard.logging_setup import setup_logging
from taskboard.routers import auth, dashboard, task, admin, user
from taskboard.utils.errors import TaskboardError, NotAuthenticated, PersistenceError
from taskboard.utils.templates import render

setup_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title="Taskboard", docs_url=None, redoc_url=None, openapi_url=None)


@app.middleware("http")
async def add_security_headers(request: Request, call_next):
    response = await call_next(request)
    for header, value in SecurityConfig.get_security_headers().items():
        response.headers.setdefault(header, value)
    return response


# Route registration
app.include_router(auth.router, tags=["Authentication"])
app.include_router(dashboard.router, tags=["Dashboard"])
app.include_router(task.router, tags=["Tasks"])
app.include_router(admin.router, tags=["Admin"])
app.include_router(user.router, tags=["Users"])


# Error pages
@app.exception_handler(NotAuthenticated)
async def not_authenticated_handler(request: Request, exc: NotAuthenticated):
    return RedirectResponse("/login", status_code=status.HTTP_303_SEE_OTHER)


@app.exception_handler(TaskboardError)
async def taskboard_error_handler(request: Request, exc: TaskboardError):
    if exc.status_code >= 500:
        logger.error("%s on %s: %s", type(exc).__name__, request.url.path, exc.message)
    return render(request, "error.html", {"title": exc.title, "message": exc.message},
                  status_code=exc.status_code)


@app.exception_handler(SQLAlchemyError)
async def persistence_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception("Database error on %s: %s", request.url.path, exc.__class__.__name__)
    error = PersistenceError()
    return render(request, "error.html", {"title": error.title, "message": error.message},
                  status_code=error.status_code)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        return render(request, "404.html", {"title": "Page Not Found"}, status_code=exc.status_code)
    return render(request, "error.html", {"title": "Error", "message": str(exc.detail)},
                  status_code=exc.status_code)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    return render(request, "error.html", {"title": "Invalid Request", "message": "The request was not valid."},
                  status_code=status.HTTP_400_BAD_REQUEST)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s", request.url.path)
    message = "Something went wrong!" if settings.is_production() else str(exc)
    return render(request, "error.html", {"title": "Error", "message": message},
                  status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


@app.on_event("startup")
async def startup_event():
    logger.info("Starting Taskboard (%s)", settings.ENVIRONMENT)
    if settings.uses_default_secret():
        logger.warning("SESSION_SECRET is not set; using the demo secret. Set it for any real deployment.")


@app.get("/health")
def health():
    return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}
