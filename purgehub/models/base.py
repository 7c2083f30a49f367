"""Declarative base for the moderation tables and the platform tables they reference."""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass
