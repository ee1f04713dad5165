from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, EmailStr, Field


class LoginRole(str, Enum):
    coach = "coach"
    player = "player"


class APIMessage(BaseModel):
    message: str = Field(..., description="Human readable message")


# Request bodies keep every field optional so that a missing value reaches the
# service layer and is reported as "All fields are required." with a 400.

class SignupRequest(BaseModel):
    name: Optional[str] = Field(None, description="Display name, also the initial_login identity")
    email: Optional[EmailStr] = Field(None, description="User email address")
    password: Optional[str] = Field(None, description="Password")


class SignupResponse(APIMessage):
    userId: int


class CoachCreate(BaseModel):
    name: Optional[str] = None
    age: Optional[int] = None
    experience: Optional[int] = Field(None, description="Years of coaching experience")
    associated_with: Optional[int] = Field(None, description="Team id the coach belongs to")
    username: Optional[str] = None
    password: Optional[str] = None


class CoachCreated(APIMessage):
    coachId: int


class TeamCreate(BaseModel):
    name: Optional[str] = None
    game: Optional[str] = Field(None, description="Sport played by the team")
    location: Optional[str] = None
    coached_by: Optional[int] = Field(None, description="Coach id")


class TeamCreated(APIMessage):
    teamId: int


class PlayerCreate(BaseModel):
    name: Optional[str] = None
    position: Optional[str] = None
    age: Optional[int] = None
    team: Optional[str] = Field(None, description="Team name (free text)")
    email: Optional[EmailStr] = None
    password: Optional[str] = None


class PlayerCreated(APIMessage):
    playerId: int


class LoginRequest(BaseModel):
    username: Optional[str] = Field(None, description="Coach username or player name")
    password: Optional[str] = None
    role: Optional[str] = Field(None, description="coach or player")


class LoginResponse(APIMessage):
    role: LoginRole


class InitialLoginRequest(BaseModel):
    name: Optional[str] = None
    password: Optional[str] = None


class TokenResponse(APIMessage):
    token: str = Field(..., description="JWT access token, valid for one hour")


class CoachProfile(BaseModel):
    name: str
    experience: int
    age: int
    team: Optional[str] = Field(None, description="Team name, null when associated_with matches no team")
    associated_with: int


class Player(BaseModel):
    id: int
    player_name: str
    position: str
    age: int
    team: str
    email: str
    created_at: Optional[datetime] = None
