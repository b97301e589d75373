"""Pydantic schemas that describe activity payloads for the API."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class ActivityEnvelope(BaseModel):
    activity: dict[str, Any] = Field(default_factory=dict)

    model_config = {
        "json_schema_extra": {
            "example": {
                "activity": {
                    "username": "alice",
                    "date": "2024-01-01",
                    "duration": 90,
                    "description": "Code review",
                }
            }
        }
    }


class ActivityList(BaseModel):
    activities: list[dict[str, Any]] = Field(default_factory=list)


class ActivityCreated(BaseModel):
    message: str = "ok"
    recordId: int
