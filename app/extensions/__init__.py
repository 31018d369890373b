# app/extensions/__init__.py

from .db import db, redis_connection

__all__ = [
    "db",
    "redis_connection",
]
