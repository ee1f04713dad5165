import logging
from typing import Any, Dict

from src.teams_api import db
from src.teams_api.errors import NotFoundError, ValidationError, store_errors

logger = logging.getLogger(__name__)


# PUBLIC_INTERFACE
def find_coach_by_name(name: str) -> Dict[str, Any]:
    """Oldest coach with this name, joined to its team. team is None when associated_with matches no team."""
    if not name:
        raise ValidationError("Coach name is required.")
    with store_errors("fetching the coach"):
        row = db.fetch_one(
            """
            SELECT c.name, c.experience, c.age, t.team_name AS team, c.associated_with
            FROM coaches c
            LEFT JOIN teams t ON c.associated_with = t.id
            WHERE c.name=%s
            ORDER BY c.id ASC
            LIMIT 1
            """,
            [name],
        )
    if not row:
        logger.warning("Coach with name %r not found", name)
        raise NotFoundError("Coach not found.")
    return row


# PUBLIC_INTERFACE
def find_player_by_name(player_name: str) -> Dict[str, Any]:
    """Oldest player with this exact name, without the credential column."""
    if not player_name:
        raise ValidationError("Player name is required.")
    with store_errors("fetching the player"):
        row = db.fetch_one(
            """
            SELECT id, player_name, position, age, team, email, created_at
            FROM players
            WHERE player_name=%s
            ORDER BY id ASC
            LIMIT 1
            """,
            [player_name],
        )
    if not row:
        logger.warning("Player with name %r not found", player_name)
        raise NotFoundError("Player not found.")
    return row
