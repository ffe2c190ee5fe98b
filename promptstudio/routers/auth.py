"""
Authentication router - register, login, logout and session checks.
JWT + httponly cookies, one active session per user.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Form, HTTPException, Request, Response, status
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from promptstudio.config import get_settings
from promptstudio.database import get_db
from promptstudio.models import User, UserSession
from promptstudio.services import analytics
from promptstudio.services import auth as auth_service
from promptstudio.templating import templates
from promptstudio.utils.constants import ERROR_MESSAGES, EVENT_LOGIN
from promptstudio.utils.validation import validate_email, validate_name, validate_password

router = APIRouter(prefix="/auth", tags=["auth"])

settings = get_settings()

# Cookie settings
COOKIE_NAME = "promptstudio_token"
SESSION_COOKIE_NAME = "promptstudio_session"
COOKIE_MAX_AGE = 60 * 60 * 24 * settings.session_expire_days


def request_metadata(request: Request) -> dict:
    """user_agent / ip_address for analytics and session rows."""
    return {
        "user_agent": request.headers.get("user-agent"),
        "ip_address": request.client.host if request.client else None,
    }


def safe_next(next_url: Optional[str]) -> str:
    """Only allow local redirect targets."""
    if not next_url or not next_url.startswith("/") or next_url.startswith("//"):
        return "/"
    return next_url


async def get_current_user(
    request: Request,
    db: AsyncSession = Depends(get_db)
) -> Optional[User]:
    """
    Dependency to get the current authenticated user from the JWT cookie.
    Returns None if not authenticated (doesn't raise). The live session
    row is left on request.state.user_session.
    """
    token = request.cookies.get(COOKIE_NAME)
    session_id = request.cookies.get(SESSION_COOKIE_NAME)
    if not token or not session_id:
        return None

    payload = auth_service.decode_access_token(token)
    if not payload:
        return None

    try:
        user_id = int(payload.get("sub", ""))
    except ValueError:
        return None

    session = await auth_service.get_active_session(db, user_id, session_id)
    if not session:
        return None

    user = await auth_service.find_user_by_id(db, user_id)
    if not user:
        return None

    request.state.user_session = session
    return user


async def require_auth(
    request: Request,
    db: AsyncSession = Depends(get_db)
) -> User:
    """Dependency that requires authentication; 401 otherwise."""
    user = await get_current_user(request, db)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated"
        )
    return user


async def require_admin(user: User = Depends(require_auth)) -> User:
    if not user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required"
        )
    return user


async def require_session(
    request: Request,
    user: User = Depends(require_auth)
) -> UserSession:
    """The caller's login session row (wizard progress lives here)."""
    return request.state.user_session


def _login_redirect(user: User, session_id: str, next_url: str) -> RedirectResponse:
    """Redirect carrying fresh token and session cookies."""
    token = auth_service.create_access_token({
        "sub": str(user.id),
        "email": user.email,
        "session_id": session_id,
    })

    response = RedirectResponse(url=safe_next(next_url), status_code=status.HTTP_303_SEE_OTHER)
    for key, value in ((COOKIE_NAME, token), (SESSION_COOKIE_NAME, session_id)):
        response.set_cookie(
            key=key,
            value=value,
            max_age=COOKIE_MAX_AGE,
            httponly=True,
            samesite="lax",
            secure=settings.secure_cookies,
        )
    return response


@router.get("/register", response_class=HTMLResponse)
async def register_page(
    request: Request,
    db: AsyncSession = Depends(get_db)
):
    if await get_current_user(request, db):
        return RedirectResponse(url="/", status_code=status.HTTP_302_FOUND)
    return templates.TemplateResponse(request, "auth/register.html", {"error": None, "form": {}})


@router.post("/register")
async def register(
    request: Request,
    db: AsyncSession = Depends(get_db),
    name: str = Form(""),
    email: str = Form(""),
    password: str = Form(""),
    confirm_password: str = Form(""),
):
    """
    Create an account and log straight in.
    Validation problems re-render the form with a 400.
    """
    form = {"name": name, "email": email}

    def form_error(message: str, status_code: int = status.HTTP_400_BAD_REQUEST):
        return templates.TemplateResponse(
            request,
            "auth/register.html",
            {"error": message, "form": form},
            status_code=status_code,
        )

    if not name or not email or not password:
        return form_error(ERROR_MESSAGES["auth"]["all_fields_required"])

    for is_valid, error in (validate_name(name), validate_email(email.strip()), validate_password(password)):
        if not is_valid:
            return form_error(error)

    if password != confirm_password:
        return form_error(ERROR_MESSAGES["auth"]["password_mismatch"])

    try:
        user = await auth_service.create_user(db, name, email, password)
    except auth_service.EmailAlreadyRegistered:
        return form_error(ERROR_MESSAGES["auth"]["email_already_registered"], status.HTTP_409_CONFLICT)

    meta = request_metadata(request)
    session_id = await auth_service.create_session(db, user.id, **meta)
    await analytics.log_event(db, EVENT_LOGIN, user_id=user.id, metadata={"registration": True}, **meta)
    return _login_redirect(user, session_id, "/")


@router.get("/login", response_class=HTMLResponse)
async def login_page(
    request: Request,
    db: AsyncSession = Depends(get_db),
    error: Optional[str] = None,
    next: Optional[str] = None
):
    """Render the login page. Redirects home if already logged in."""
    if await get_current_user(request, db):
        return RedirectResponse(url="/", status_code=status.HTTP_302_FOUND)

    if error == "session_expired":
        error = ERROR_MESSAGES["auth"]["session_expired"]

    return templates.TemplateResponse(
        request,
        "auth/login.html",
        {"error": error, "next": safe_next(next), "email": ""},
    )


@router.post("/login")
async def login(
    request: Request,
    db: AsyncSession = Depends(get_db),
    email: str = Form(""),
    password: str = Form(""),
    next: str = Form("/")
):
    """Handle login form submission. Sets JWT token and session cookies on success."""
    if not email or not password:
        error = ERROR_MESSAGES["auth"]["email_password_required"]
        user = None
    else:
        user = await auth_service.authenticate_user(db, email, password)
        error = None if user else ERROR_MESSAGES["auth"]["invalid_credentials"]

    if not user:
        return templates.TemplateResponse(
            request,
            "auth/login.html",
            {"error": error, "next": safe_next(next), "email": email},
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    meta = request_metadata(request)
    session_id = await auth_service.create_session(db, user.id, **meta)
    await analytics.log_event(db, EVENT_LOGIN, user_id=user.id, **meta)
    return _login_redirect(user, session_id, next)


@router.get("/logout")
@router.post("/logout")
async def logout(
    request: Request,
    db: AsyncSession = Depends(get_db)
):
    """Invalidate the session (and its wizard progress) and clear cookies."""
    session_id = request.cookies.get(SESSION_COOKIE_NAME)
    if session_id:
        await auth_service.invalidate_session(db, session_id)

    response = RedirectResponse(url="/auth/login", status_code=status.HTTP_303_SEE_OTHER)
    response.delete_cookie(COOKIE_NAME)
    response.delete_cookie(SESSION_COOKIE_NAME)
    return response


@router.get("/session-check")
async def check_session(
    request: Request,
    db: AsyncSession = Depends(get_db)
):
    """
    HTMX endpoint to check if the session is still valid.
    401 with HX-Redirect if it was replaced by a login elsewhere.
    """
    user = await get_current_user(request, db)
    if not user:
        response = Response(status_code=status.HTTP_401_UNAUTHORIZED)
        response.headers["HX-Redirect"] = "/auth/login?error=session_expired"
        return response
    return {"status": "valid", "email": user.email}
