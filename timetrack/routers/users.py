from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..crud.accounts import authenticate_account, register_account
from ..db.session import get_db
from ..schemas.account import AuthenticateRequest, MessageOut, RegisterRequest

router = APIRouter(prefix="/user", tags=["user"])


@router.post("/register", response_model=MessageOut, summary="Register a new account")
def api_register(payload: RegisterRequest, db: Session = Depends(get_db)):
    register_account(db, payload.user)
    return MessageOut(message="ok")


@router.post("/authenticate", response_model=dict[str, Any], summary="Log in with uid and password")
def api_authenticate(payload: AuthenticateRequest, db: Session = Depends(get_db)):
    return authenticate_account(db, payload.username, payload.password)
