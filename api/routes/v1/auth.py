"""
api/routes/v1/auth.py -- Signup, signin and identity REST endpoints.

Routes:
  POST /api/v1/auth/signup   -- create account, returns token + user (public)
  POST /api/v1/auth/signin   -- password signin, returns token + user (public)
  GET  /api/v1/auth/me       -- current user (requires auth)
  GET  /api/v1/auth/users    -- list all users (admin only)

Security:
  - signup and signin are rate-limited per IP (Settings.auth_rate_limit).
  - signin goes through auth.service.signin, which equalises timing and
    returns one generic error for unknown email and wrong password.
  - Cache-Control: no-store on every response that carries a token.

Blocking work (bcrypt, store access) runs through run_blocking so the event
loop stays free while a password is being hashed.
"""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from api.limiter import auth_rate_limit, limiter
from api.models import AuthResponse, SigninRequest, SignupRequest, UserResponse
from auth import service
from auth.concurrency import run_blocking
from auth.dependencies import get_auth_context
from auth.models import AuthContext
from auth.permissions import require_admin
from auth.store import UserStore

# Auth policy:
# - POST /api/v1/auth/signup:  public -- creates the credential
# - POST /api/v1/auth/signin:  public -- exchanges the credential for a token
# - GET  /api/v1/auth/me:      requires auth (get_auth_context)
# - GET  /api/v1/auth/users:   requires admin (require_admin)
router = APIRouter()


def _token_response(status_code: int, result) -> JSONResponse:
    resp = JSONResponse(status_code=status_code, content=AuthResponse.from_result(result).model_dump())
    resp.headers["Cache-Control"] = "no-store"
    return resp


# ---------------------------------------------------------------------------
# Public endpoints
# ---------------------------------------------------------------------------


@router.post("/auth/signup", response_model=AuthResponse, status_code=201)
@limiter.limit(auth_rate_limit)  # below @router so the rate-limited wrapper is what gets registered
async def signup(request: Request, body: SignupRequest) -> JSONResponse:
    """Register a new account and return a token for it.

    400 on invalid input or an email that is already registered; 403 when an
    admin account is requested and admin self-registration is disabled.
    """
    user_store: UserStore = request.app.state.user_store
    result = await run_blocking(
        service.signup,
        user_store,
        body.name,
        body.email,
        body.password,
        body.role.value,
    )
    return _token_response(201, result)


@router.post("/auth/signin", response_model=AuthResponse)
@limiter.limit(auth_rate_limit)
async def signin(request: Request, body: SigninRequest) -> JSONResponse:
    """Exchange email and password for a token.

    Unknown email and wrong password produce the same 401 body.
    """
    user_store: UserStore = request.app.state.user_store
    result = await run_blocking(service.signin, user_store, body.email, body.password)
    return _token_response(200, result)


# ---------------------------------------------------------------------------
# Authenticated endpoints
# ---------------------------------------------------------------------------


@router.get("/auth/me", response_model=UserResponse)
async def me(context: AuthContext = Depends(get_auth_context)) -> UserResponse:
    """Return identity information for the currently authenticated user."""
    return UserResponse.from_public(context.user)


@router.get("/auth/users", response_model=list[UserResponse])
async def list_users(
    request: Request,
    context: AuthContext = Depends(require_admin),
) -> list[UserResponse]:
    """List all accounts. Admin only."""
    user_store: UserStore = request.app.state.user_store
    users = await run_blocking(user_store.list_users)
    return [UserResponse.from_public(service.to_public(u)) for u in users]
