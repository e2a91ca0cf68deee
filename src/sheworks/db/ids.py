# src/sheworks/db/ids.py
"""Identifier helpers for database models."""

import uuid


def new_id() -> str:
    """Return a random identifier for participant, product and order rows."""
    return uuid.uuid4().hex
