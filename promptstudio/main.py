"""
Prompt Framework Studio - FastAPI + HTMX application.
Main entry point and app configuration.
"""
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from urllib.parse import quote

from fastapi import Depends, FastAPI, Request, status
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse, Response
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from promptstudio import __version__
from promptstudio.config import get_settings
from promptstudio.database import close_db, init_db
from promptstudio.exceptions import PromptStudioError
from promptstudio.frameworks import list_frameworks
from promptstudio.logging_setup import setup_logging
from promptstudio.models import User
from promptstudio.routers import account, admin, auth, custom_criteria, frameworks, prompts, wizard
from promptstudio.routers.auth import get_current_user
from promptstudio.templating import templates

logger = logging.getLogger(__name__)

settings = get_settings()

JSON_PREFIXES = ("/custom-criteria", "/wizard/api", "/auth/session-check", "/health")
ERROR_TEMPLATES = {
    status.HTTP_403_FORBIDDEN: "errors/403.html",
    status.HTTP_404_NOT_FOUND: "errors/404.html",
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - startup and shutdown events."""
    setup_logging(settings.log_level)
    await init_db()
    logger.info("%s %s started", settings.app_name, __version__)
    yield
    await close_db()


app = FastAPI(
    title=settings.app_name,
    description="Build structured prompts from proven reasoning frameworks",
    version=__version__,
    lifespan=lifespan,
    docs_url="/api/docs" if settings.debug else None,
    redoc_url="/api/redoc" if settings.debug else None,
)

app.mount("/static", StaticFiles(directory=str(Path(__file__).parent / "static")), name="static")

app.include_router(auth.router)
app.include_router(frameworks.router)
app.include_router(wizard.router)
app.include_router(prompts.router)
app.include_router(custom_criteria.router)
app.include_router(account.router)
app.include_router(admin.router)


# ============================================
# Root routes
# ============================================

@app.get("/", response_class=HTMLResponse)
async def home(request: Request, user: User = Depends(get_current_user)):
    """Landing page; logged-in users get the wizard and framework shortcuts."""
    return templates.TemplateResponse(
        request,
        "home.html",
        {"user": user, "frameworks": list_frameworks()},
    )


@app.get("/health")
async def health_check():
    return {"status": "healthy", "app": settings.app_name, "version": __version__}


# ============================================
# Error handlers
# ============================================

def wants_json(request: Request) -> bool:
    if request.url.path.startswith(JSON_PREFIXES):
        return True
    return "application/json" in request.headers.get("accept", "")


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException) -> Response:
    """
    HTML callers get a login redirect for 401 and error pages for 403/404;
    JSON callers get FastAPI's default body.
    """
    if wants_json(request):
        return await http_exception_handler(request, exc)

    if exc.status_code == status.HTTP_401_UNAUTHORIZED:
        login_url = f"/auth/login?next={quote(request.url.path)}"
        if request.headers.get("HX-Request") == "true":
            return Response(status_code=exc.status_code, headers={"HX-Redirect": login_url})
        return RedirectResponse(url=login_url, status_code=status.HTTP_303_SEE_OTHER)

    template = ERROR_TEMPLATES.get(exc.status_code)
    if template:
        return templates.TemplateResponse(
            request,
            template,
            {"detail": exc.detail, "user": None},
            status_code=exc.status_code,
        )
    return await http_exception_handler(request, exc)


@app.exception_handler(PromptStudioError)
async def input_error_handler(request: Request, exc: PromptStudioError) -> JSONResponse:
    """Core input errors that escape a router are caller mistakes."""
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)})


@app.exception_handler(500)
async def server_error_handler(request: Request, exc):
    logger.exception("Unhandled error on %s", request.url.path, exc_info=exc)
    return templates.TemplateResponse(
        request,
        "errors/500.html",
        {"user": None},
        status_code=500,
    )
