# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

import logging
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends, FastAPI, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from sqlalchemy.exc import SQLAlchemyError

from inkwell.auth.session import Identity, SessionTokens
from inkwell.auth.users import LOGIN_FAILED, Accounts, check_login_form
from inkwell.config import Settings, load_settings
from inkwell.core.content import render_markdown
from inkwell.core.results import Invalid, NotPermitted, Ok
from inkwell.infra.database import Database
from inkwell.infra.post_repo import PostRepo
from inkwell.infra.user_repo import UserRepo
from inkwell.permissions import cookie_settings, current_user_optional, load_identity, require_user
from inkwell.ratelimit import AUTH_LIMIT, TOO_MANY_ATTEMPTS, limiter
from inkwell.services.post_service import PostService

logger = logging.getLogger(__name__)

BASE_DIR = Path(__file__).resolve().parent

templates = Jinja2Templates(directory=str(BASE_DIR / "templates"))
templates.env.filters["markdown"] = render_markdown

GENERIC_ERROR = "Something went wrong. Please try again."

router = APIRouter()


def _render(request: Request, template_name: str, ctx: Optional[dict] = None, *, status_code: int = 200):
    """TemplateResponse wrapper injecting the current user and an error list."""
    base_ctx = {
        "current_user": current_user_optional(request),
        "errors": [],
    }
    merged = {**base_ctx, **(ctx or {})}
    return templates.TemplateResponse(request, template_name, merged, status_code=status_code)


def _redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url=url, status_code=303)


_ID_MIN, _ID_MAX = -(2 ** 63), 2 ** 63 - 1


def _parse_id(raw: str) -> Optional[int]:
    """Path id -> int; None for anything that cannot be a SQLite INTEGER."""
    try:
        value = int(str(raw).strip())
    except ValueError:
        return None
    if not _ID_MIN <= value <= _ID_MAX:
        return None
    return value


def _accounts(request: Request) -> Accounts:
    return request.app.state.accounts


def _posts(request: Request) -> PostService:
    return request.app.state.posts


def _start_session(request: Request, user_id: int, username: str) -> RedirectResponse:
    settings: Settings = request.app.state.settings
    tokens: SessionTokens = request.app.state.tokens
    resp = _redirect("/")
    resp.set_cookie(
        settings.cookie_name,
        tokens.issue(user_id, username),
        max_age=settings.session_max_age,
        **cookie_settings(settings),
    )
    return resp


# ------------------ Routes ------------------


@router.get("/", response_class=HTMLResponse)
def home(request: Request):
    user = current_user_optional(request)
    if user:
        return _render(request, "dashboard.html", {"posts": _posts(request).list_owned_posts(user.user_id)})
    return _render(request, "homepage.html")


@router.get("/login", response_class=HTMLResponse)
def login_get(request: Request):
    return _render(request, "login.html")


@router.post("/login")
@limiter.limit(AUTH_LIMIT)
def login_post(request: Request, username: str = Form(""), password: str = Form("")):
    errors = check_login_form(username, password)
    if errors:
        return _render(request, "login.html", {"errors": errors})

    user = _accounts(request).authenticate(username, password)
    if not user:
        return _render(request, "login.html", {"errors": [LOGIN_FAILED]})
    return _start_session(request, user.id, user.username)


@router.post("/signup")
@limiter.limit(AUTH_LIMIT)
def signup_post(request: Request, username: str = Form(""), password: str = Form("")):
    result = _accounts(request).register(username, password)
    if isinstance(result, Ok):
        return _start_session(request, result.value.id, result.value.username)

    error = result.error
    if isinstance(error, Invalid):
        errors = list(error.violations)
    else:
        errors = [error.message]
    return _render(request, "homepage.html", {"errors": errors})


@router.get("/logout")
def logout(request: Request):
    resp = _redirect("/")
    resp.delete_cookie(request.app.state.settings.cookie_name)
    return resp


@router.get("/create-post", response_class=HTMLResponse)
def create_post_get(request: Request, user: Identity = Depends(require_user)):
    return _render(request, "create-post.html")


@router.post("/create-post")
def create_post_post(
    request: Request,
    title: str = Form(""),
    body: str = Form(""),
    user: Identity = Depends(require_user),
):
    result = _posts(request).create_post(user.user_id, title, body)
    if isinstance(result, Ok):
        return _redirect(f"/post/{result.value.id}")
    if isinstance(result.error, Invalid):
        return _render(request, "create-post.html", {"errors": list(result.error.violations)})
    return _redirect("/")


@router.get("/post/{post_id}", response_class=HTMLResponse)
def post_view(request: Request, post_id: str):
    post = _posts(request).get_post(_parse_id(post_id))
    if not post:
        return _redirect("/")
    user = current_user_optional(request)
    is_author = bool(user) and post.owner_id == user.user_id
    return _render(request, "single-post.html", {"post": post, "is_author": is_author})


@router.get("/edit-post/{post_id}", response_class=HTMLResponse)
def edit_post_get(request: Request, post_id: str, user: Identity = Depends(require_user)):
    post = _posts(request).owned_post(_parse_id(post_id), user.user_id)
    if not post:
        return _redirect("/")
    return _render(request, "edit-post.html", {"post": post})


@router.post("/edit-post/{post_id}")
def edit_post_post(
    request: Request,
    post_id: str,
    title: str = Form(""),
    body: str = Form(""),
    user: Identity = Depends(require_user),
):
    service = _posts(request)
    pid = _parse_id(post_id)
    result = service.update_post(pid, user.user_id, title, body)
    if isinstance(result, Ok):
        return _redirect(f"/post/{result.value.id}")
    if isinstance(result.error, NotPermitted):
        return _redirect("/")
    post = service.get_post(pid)
    if post is None:
        return _redirect("/")
    return _render(request, "edit-post.html", {"post": post, "errors": list(result.error.violations)})


@router.post("/delete-post/{post_id}")
def delete_post(request: Request, post_id: str, user: Identity = Depends(require_user)):
    _posts(request).delete_post(_parse_id(post_id), user.user_id)
    return _redirect("/")


# ------------------ Application ------------------


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the app and every long-lived component exactly once."""
    settings = settings or load_settings()

    db = Database(settings.db_path, timeout=settings.db_timeout)
    db.init_schema()

    app = FastAPI()
    app.state.settings = settings
    app.state.tokens = SessionTokens(settings.secret_key, max_age=settings.session_max_age)
    app.state.accounts = Accounts(UserRepo(db))
    app.state.posts = PostService(PostRepo(db))

    limiter.enabled = settings.rate_limit_enabled
    app.state.limiter = limiter
    app.add_middleware(SlowAPIMiddleware)

    # Registered after the rate limiter so it wraps it: a 429 still clears a bad cookie.
    @app.middleware("http")
    async def _auth_middleware(request: Request, call_next):
        token = request.cookies.get(settings.cookie_name, "")
        request.state.user = load_identity(request)
        response = await call_next(request)
        if token and request.state.user is None:
            fresh = any(
                v.startswith(f"{settings.cookie_name}=") for v in response.headers.getlist("set-cookie")
            )
            if not fresh:
                response.delete_cookie(settings.cookie_name)
        return response

    # Must stay sync: SlowAPIMiddleware calls it without awaiting.
    @app.exception_handler(RateLimitExceeded)
    def _rate_limited(request: Request, exc: RateLimitExceeded):
        logger.warning("Rate limit exceeded for %s (%s)", request.client.host if request.client else "?", exc.detail)
        return _render(request, "homepage.html", {"errors": [TOO_MANY_ATTEMPTS]}, status_code=429)

    @app.exception_handler(SQLAlchemyError)
    async def _store_error(request: Request, exc: SQLAlchemyError):
        logger.error("Database error on %s %s", request.method, request.url.path, exc_info=exc)
        return _render(request, "homepage.html", {"errors": [GENERIC_ERROR]}, status_code=500)

    app.include_router(router)
    logger.info("inkwell ready (db=%s)", settings.db_path)
    return app
