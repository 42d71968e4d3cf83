"""DTOs for Identity app."""
from dataclasses import dataclass
from uuid import UUID
from typing import Optional, List

from ninja import Schema


@dataclass(frozen=True)
class UserDTO:
    id: UUID
    username: str
    email: str
    name: str
    role: str
    status: str
    org_id: Optional[UUID]
    permissions: List[str]


class LoginIn(Schema):
    username: str
    password: str


class TokenResponse(Schema):
    success: bool
    user: Optional[UserDTO] = None
    message: Optional[str] = None
