"""Foundational TypedDicts for dataclass to_dict() returns."""

from __future__ import annotations

from typing import NewType, TypedDict

ISOTimestamp = NewType("ISOTimestamp", str)


class ServiceConfig(TypedDict, total=False):
    """Shape of the optional JSON config file."""

    url_base: str
    id_start: int
    log_dir: str
    log_level: str
    timeout: float
    concurrent: bool


class CommentDict(TypedDict):
    text: str
    internal: bool
    created_at: ISOTimestamp


class TicketDict(TypedDict):
    id: str
    title: str
    description: str
    priority: str
    status: str
    system: str
    created_at: ISOTimestamp
    updated_at: ISOTimestamp
    assignee: str | None
    comments: list[CommentDict]


class ArticleDict(TypedDict):
    id: str
    title: str
    summary: str
    url: str
