"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class SessionStatus(StrEnum):
    ACTIVE = "active"
    LOGGED_OUT = "logged_out"
    ARCHIVED = "archived"  # terminal


class MergeStrategy(StrEnum):
    """How a freshly registered duplicate is resolved once merged into a survivor."""

    DEACTIVATE = "deactivate"
    DELETE = "delete"
