"""
SQLAlchemy ORM models for the Article backend.

Tables:
    users     — account holders
    articles  — content records, each referencing the user that owns it
"""
from datetime import datetime

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship, validates

from database import Base
from domain.validation import email_format, required


def _trim(value):
    return value.strip() if isinstance(value, str) else value


class User(Base):
    """Account holders. Articles point at users, never the other way round."""
    __tablename__ = "users"

    __validation_rules__ = (
        required("username", "Please fill in a username"),
        required("email", "Please fill in your email"),
        email_format("email", "Please fill a valid email address"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    first_name = Column(String(100), nullable=False, default="")
    last_name = Column(String(100), nullable=False, default="")
    display_name = Column(String(200), nullable=False, default="")
    email = Column(String(254), nullable=False, index=True)
    username = Column(String(100), unique=True, nullable=False, index=True)
    password = Column(String(255), nullable=False, default="")  # hashed by the auth subsystem
    provider = Column(String(50), nullable=False, default="local")
    roles = Column(String(100), nullable=False, default="user")  # comma-separated
    created = Column(DateTime, default=datetime.utcnow)
    updated = Column(DateTime, nullable=True, onupdate=datetime.utcnow)

    @validates("first_name", "last_name", "display_name", "email", "username")
    def _trim_fields(self, key, value):
        return _trim(value)

    def __repr__(self) -> str:
        return f"<User id={self.id} username={self.username!r}>"


class Article(Base):
    """
    A content record owned by one user.

    ``user_id`` is the foreign identifier; ``user`` is the resolved reference.
    Deleting articles never touches the owning user.
    """
    __tablename__ = "articles"

    __validation_rules__ = (
        required("title", "Title cannot be blank"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    created = Column(DateTime, default=datetime.utcnow, index=True)
    title = Column(String(255), nullable=False, default="")
    content = Column(Text, nullable=False, default="")
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)

    # One-way: User carries no articles collection
    user = relationship("User", lazy="select")

    __table_args__ = (
        # For per-owner listings ordered newest first
        Index("ix_articles_user_created", "user_id", "created"),
    )

    @validates("title", "content")
    def _trim_fields(self, key, value):
        return _trim(value)

    def __repr__(self) -> str:
        return f"<Article id={self.id} title={self.title!r}>"
