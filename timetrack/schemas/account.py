from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field


class RegisterRequest(BaseModel):
    # Profile fields are free-form; only uid/password are checked downstream.
    user: dict[str, Any] = Field(default_factory=dict)

    model_config = {
        "json_schema_extra": {
            "example": {"user": {"uid": "alice", "password": "s3cret", "firstName": "Alice"}}
        }
    }


class AuthenticateRequest(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None

    model_config = {
        "json_schema_extra": {
            "example": {"username": "alice", "password": "s3cret"}
        }
    }


class MessageOut(BaseModel):
    message: str
