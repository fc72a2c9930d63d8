"""Shared dependencies for API routes."""

from fastapi import Header, HTTPException, Request

from services.gemini_client import get_client
from services.record_store import RecordStore


def get_record_store(request: Request) -> RecordStore:
    return request.app.state.record_store


def get_user_id(x_user_id: str | None = Header(None, alias="X-User-Id")) -> str:
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(status_code=401, detail="Missing X-User-Id header")
    return x_user_id.strip()


def get_gemini_client():
    return get_client()
