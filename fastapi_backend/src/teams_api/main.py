import logging
import os
from typing import Any, Dict, Optional

from fastapi import Depends, FastAPI, Query, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.teams_api import credentials, db, readers, registrar
from src.teams_api.config import Settings, get_settings
from src.teams_api.errors import ServiceError, StoreError, ValidationError, store_errors
from src.teams_api.schemas import (
    APIMessage,
    CoachCreate,
    CoachCreated,
    CoachProfile,
    InitialLoginRequest,
    LoginRequest,
    LoginResponse,
    LoginRole,
    Player,
    PlayerCreate,
    PlayerCreated,
    SignupRequest,
    SignupResponse,
    TeamCreate,
    TeamCreated,
    TokenResponse,
)


def _log_level(value: Optional[str]) -> str:
    level = (value or "INFO").strip().upper()
    return level if isinstance(logging.getLevelName(level), int) else "INFO"


logging.basicConfig(level=_log_level(os.getenv("LOG_LEVEL")))
logger = logging.getLogger(__name__)

openapi_tags = [
    {"name": "Health", "description": "Service health checks."},
    {"name": "Auth", "description": "Signup and the coach/player/user logins."},
    {"name": "Coaches", "description": "Coach registration and lookup."},
    {"name": "Teams", "description": "Team registration."},
    {"name": "Players", "description": "Player registration and lookup."},
]

app = FastAPI(
    title="Team Roster API",
    description=(
        "Backend API for managing sports teams, their coaches and players.\n\n"
        "Every error response carries a short `message` field."
    ),
    version="1.0.0",
    openapi_tags=openapi_tags,
)

# CORS: allow all by default. Restrict via CORS_ALLOW_ORIGINS env (comma separated).
allow_origins = ["*"]
env_val = os.getenv("CORS_ALLOW_ORIGINS")
if env_val:
    allow_origins = [o.strip() for o in env_val.split(",") if o.strip()]

app.add_middleware(
    CORSMiddleware,
    allow_origins=allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ServiceError)
def _service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    body: Dict[str, Any] = {"message": exc.message}
    if isinstance(exc, StoreError) and exc.detail and get_settings().expose_error_details:
        body["error"] = exc.detail
    return JSONResponse(status_code=exc.status_code, content=body)


@app.exception_handler(RequestValidationError)
def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    if all(e.get("type") == "missing" or e.get("input") in (None, "") for e in errors):
        message = ValidationError.default_message
    else:
        message = "Invalid request body."
    logger.debug("Rejected %s %s: %s", request.method, request.url.path, errors)
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"message": message})


@app.exception_handler(Exception)
def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled error on %s %s: %s", request.method, request.url.path, exc, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": ServiceError.default_message},
    )


@app.on_event("startup")
def _startup() -> None:
    settings = get_settings()
    db.init_db_pool(settings)
    if settings.init_schema:
        db.init_schema()
    logger.info("Connected to the database, 1 + 1 = %d", db.ping())


@app.on_event("shutdown")
def _shutdown() -> None:
    db.close_db_pool()


@app.get("/", response_model=APIMessage, tags=["Health"], summary="Health check")
def health_check() -> APIMessage:
    """Health check endpoint; also round-trips a query to the database."""
    with store_errors("checking the database"):
        db.ping()
    return APIMessage(message="Healthy")


# =========================
# Auth
# =========================

@app.post(
    "/signup",
    response_model=SignupResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["Auth"],
    summary="Sign up",
)
def signup(payload: SignupRequest) -> SignupResponse:
    """Create a generic user account."""
    user_id = registrar.register_user(payload.model_dump())
    return SignupResponse(message="Signup successful!", userId=user_id)


@app.post("/login", response_model=LoginResponse, tags=["Auth"], summary="Coach or player login")
def login(payload: LoginRequest) -> LoginResponse:
    """Check a coach's username or a player's name against the stored password."""
    if not payload.username or not payload.password or not payload.role:
        raise ValidationError("All fields are required.")
    if payload.role not in {r.value for r in LoginRole}:
        raise ValidationError("Invalid role.")

    _, role = credentials.authenticate(payload.username, payload.password, payload.role)
    return LoginResponse(message=f"Welcome, {payload.username}!", role=role)


@app.post("/initial_login", response_model=TokenResponse, tags=["Auth"], summary="User login with token")
def initial_login(payload: InitialLoginRequest, settings: Settings = Depends(get_settings)) -> TokenResponse:
    """Authenticate a generic user by name and return a one-hour access token."""
    _, token = credentials.issue_token(payload.name, payload.password, settings)
    return TokenResponse(message=f"Welcome, {payload.name}!", token=token)


# =========================
# Coaches
# =========================

@app.post(
    "/add-coach",
    response_model=CoachCreated,
    status_code=status.HTTP_201_CREATED,
    tags=["Coaches"],
    summary="Add coach",
)
def add_coach(payload: CoachCreate) -> CoachCreated:
    """Register a coach; usernames are unique."""
    coach_id = registrar.register_coach(payload.model_dump())
    return CoachCreated(message="Coach added successfully!", coachId=coach_id)


@app.get("/api/coach", response_model=CoachProfile, tags=["Coaches"], summary="Get coach by name")
def get_coach(name: str = Query("", description="Coach name (exact match)")) -> Dict[str, Any]:
    return readers.find_coach_by_name(name)


# =========================
# Teams
# =========================

@app.post(
    "/add-team",
    response_model=TeamCreated,
    status_code=status.HTTP_201_CREATED,
    tags=["Teams"],
    summary="Add team",
)
def add_team(payload: TeamCreate) -> TeamCreated:
    team_id = registrar.register_team(payload.model_dump())
    return TeamCreated(message="Team added successfully!", teamId=team_id)


# =========================
# Players
# =========================

@app.post(
    "/add-player",
    response_model=PlayerCreated,
    status_code=status.HTTP_201_CREATED,
    tags=["Players"],
    summary="Add player",
)
def add_player(payload: PlayerCreate) -> PlayerCreated:
    """Register a player; emails are unique."""
    player_id = registrar.register_player(payload.model_dump())
    return PlayerCreated(message="Player added successfully!", playerId=player_id)


@app.get("/api/player/{player_name}", response_model=Player, tags=["Players"], summary="Get player by name")
def get_player(player_name: str) -> Dict[str, Any]:
    """Return the player's record, without the password hash."""
    return readers.find_player_by_name(player_name)
