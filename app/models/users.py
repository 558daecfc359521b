from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class UserModel(BaseModel):
    id: int
    name: str
    email: str
    active: bool
    created_at: datetime


class CreateUserRequest(BaseModel):
    model_config = ConfigDict(
        json_schema_extra={"example": {"name": "Jane Doe", "email": "jane@example.com"}}
    )

    name: str
    email: str


class UpdateUserRequest(BaseModel):
    model_config = ConfigDict(
        json_schema_extra={
            "example": {"name": "Jane Smith", "email": "jane.smith@example.com", "active": False}
        }
    )

    name: Optional[str] = None
    email: Optional[str] = None
    active: Optional[bool] = None

    def changes(self) -> dict:
        """Only the fields the client actually set to a value"""
        return self.model_dump(exclude_none=True)


class UserResponse(BaseModel):
    id: str
    name: str
    email: str
    active: bool
    created_at: str

    @classmethod
    def from_user(cls, user: UserModel) -> "UserResponse":
        return cls(
            id=str(user.id),
            name=user.name,
            email=user.email,
            active=user.active,
            created_at=user.created_at.isoformat(),
        )


class ErrorResponse(BaseModel):
    success: bool = False
    message: str


class HealthResponse(BaseModel):
    status: str
    timestamp: str
