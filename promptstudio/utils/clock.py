"""Naive-UTC timestamps, matching what the DateTime columns store."""
from datetime import datetime, timezone


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)
