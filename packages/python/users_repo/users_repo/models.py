"""Pydantic models describing users and the threads they author."""

from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

SortOrder = Literal["asc", "ascending", "desc", "descending", 1, -1]


class User(BaseModel):
    """Representation of a user profile stored in MongoDB.

    ``key`` is the internal ``_id``; ``id`` is the external identity id.
    """

    key: str
    id: str
    username: str
    name: str
    bio: Optional[str] = None
    image: Optional[str] = None
    onboarded: bool = False
    threads: List[str] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class UserProfileUpdate(BaseModel):
    """Payload for creating or updating a user's profile."""

    username: str
    name: str
    bio: str = ""
    image: str = ""
    path: Optional[str] = None


class UserPage(BaseModel):
    """One page of a user listing."""

    users: List[User] = Field(default_factory=list)
    has_next: bool = False


class AuthorSummary(BaseModel):
    """Subset of a user shown next to a thread."""

    key: str
    id: Optional[str] = None
    name: Optional[str] = None
    image: Optional[str] = None


class ThreadReply(BaseModel):
    """A reply thread with its author resolved."""

    key: str
    text: Optional[str] = None
    author: Optional[AuthorSummary] = None
    parent_id: Optional[str] = None
    children: List[str] = Field(default_factory=list)
    created_at: Optional[datetime] = None


class AuthoredThread(BaseModel):
    """A thread authored by the user, with its replies resolved one level deep."""

    key: str
    text: Optional[str] = None
    author: Optional[str] = None
    parent_id: Optional[str] = None
    children: List[ThreadReply] = Field(default_factory=list)
    created_at: Optional[datetime] = None


class UserThreads(BaseModel):
    """A user together with the threads they authored."""

    user: User
    threads: List[AuthoredThread] = Field(default_factory=list)


# Activity entries share the reply shape: a thread by someone else, author resolved.
ActivityItem = ThreadReply
