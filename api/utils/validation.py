"""Validation utilities."""
from fastapi import HTTPException


def validate_id(name: str, value: str) -> str:
    """Validate an identifier taken from a path or payload."""
    if not isinstance(value, str):
        raise HTTPException(status_code=400, detail=f"{name} is required")
    cleaned = value.strip()
    if not cleaned:
        raise HTTPException(status_code=400, detail=f"{name} is required")
    if len(cleaned) > 64 or any(ch in cleaned for ch in "/\\"):
        raise HTTPException(status_code=400, detail=f"Invalid {name}")
    return cleaned
