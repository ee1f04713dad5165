"""
Inserts for users, coaches, teams and players.

Identifiers come from the store (SERIAL + RETURNING id) and uniqueness is a
unique index, so a duplicate surfaces as a UniqueViolation on the INSERT.
"""
import logging
from typing import Any, Mapping, Sequence

from psycopg2 import errors as pg_errors

from src.teams_api import db
from src.teams_api.auth_utils import hash_password
from src.teams_api.errors import ConflictError, ValidationError, store_errors

logger = logging.getLogger(__name__)

USER_FIELDS = ("name", "email", "password")
COACH_FIELDS = ("name", "age", "experience", "associated_with", "username", "password")
TEAM_FIELDS = ("name", "game", "location", "coached_by")
PLAYER_FIELDS = ("name", "position", "age", "team", "email", "password")


def _require(fields: Mapping[str, Any], names: Sequence[str]) -> None:
    missing = [n for n in names if not fields.get(n)]
    if missing:
        logger.debug("Rejected registration, missing %s", ", ".join(missing))
        raise ValidationError("All fields are required.")


def _insert(query: str, params: Sequence[Any], action: str, duplicate_message: str) -> int:
    with store_errors(action):
        try:
            row = db.execute_returning_one(query, params)
        except pg_errors.UniqueViolation as exc:
            logger.warning("Duplicate rejected while %s", action)
            raise ConflictError(duplicate_message) from exc
    return int(row["id"])


# PUBLIC_INTERFACE
def register_user(fields: Mapping[str, Any]) -> int:
    """Create a generic user (role 'user'). Returns the new id."""
    _require(fields, USER_FIELDS)
    return _insert(
        "INSERT INTO users (name, email, password_hash) VALUES (%s, %s, %s) RETURNING id",
        [fields["name"], str(fields["email"]).lower(), hash_password(fields["password"])],
        "signing up",
        "Email already exists.",
    )


# PUBLIC_INTERFACE
def register_coach(fields: Mapping[str, Any]) -> int:
    """Create a coach. Returns the store-assigned coach id."""
    _require(fields, COACH_FIELDS)
    return _insert(
        """
        INSERT INTO coaches (name, age, experience, associated_with, username, password_hash)
        VALUES (%s, %s, %s, %s, %s, %s)
        RETURNING id
        """,
        [
            fields["name"],
            fields["age"],
            fields["experience"],
            fields["associated_with"],
            fields["username"],
            hash_password(fields["password"]),
        ],
        "adding the coach",
        "Username already exists.",
    )


# PUBLIC_INTERFACE
def register_team(fields: Mapping[str, Any]) -> int:
    """Create a team. coached_by is stored as-is, it is not checked against coaches."""
    _require(fields, TEAM_FIELDS)
    return _insert(
        "INSERT INTO teams (team_name, game_type, location, coach_id) VALUES (%s, %s, %s, %s) RETURNING id",
        [fields["name"], fields["game"], fields["location"], fields["coached_by"]],
        "adding the team",
        "Team already exists.",
    )


# PUBLIC_INTERFACE
def register_player(fields: Mapping[str, Any]) -> int:
    """Create a player. Returns the new player id."""
    _require(fields, PLAYER_FIELDS)
    return _insert(
        """
        INSERT INTO players (player_name, position, age, team, email, password_hash)
        VALUES (%s, %s, %s, %s, %s, %s)
        RETURNING id
        """,
        [
            fields["name"],
            fields["position"],
            fields["age"],
            fields["team"],
            str(fields["email"]).lower(),
            hash_password(fields["password"]),
        ],
        "adding the player",
        "Email already exists. Please use a different email.",
    )
