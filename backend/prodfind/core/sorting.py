"""Ordering helper for listing queries."""

from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy import asc, desc
from sqlalchemy.orm import Query

from prodfind.core.database import Base


def parse_order_by(
    order_by: str | None,
    allowed_fields: Iterable[str],
    default_field: str,
    default_direction: str = "desc",
) -> tuple[str, str]:
    """Split a ``"field:direction"`` string into a validated (field, direction) pair.

    Unknown fields fall back to the defaults; an unknown direction falls back
    to ``default_direction``. A bare field name sorts ascending.
    """
    if not order_by:
        return default_field, default_direction

    field, _, direction = order_by.partition(":")
    if field not in set(allowed_fields):
        return default_field, default_direction
    if not direction:
        return field, "asc"
    if direction not in ("asc", "desc"):
        return field, default_direction
    return field, direction


def apply_order_by(
    query: Query,  # type: ignore[type-arg]
    model: type[Base],
    order_by: str | None,
    allowed_fields: Iterable[str],
    default_field: str = "created_at",
    default_direction: str = "desc",
) -> Query:  # type: ignore[type-arg]
    """Apply a client-supplied ordering restricted to ``allowed_fields``.

    The primary key is always appended as a tie-breaker so pagination is stable.
    """
    field, direction = parse_order_by(order_by, allowed_fields, default_field, default_direction)
    order_func = asc if direction == "asc" else desc
    return query.order_by(order_func(getattr(model, field)), desc(model.id))
