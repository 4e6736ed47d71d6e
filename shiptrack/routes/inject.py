"""Route registration.

Called from startup to register every blueprint, the not-found handler
and the shared layout context.
"""
from __future__ import annotations
from typing import Any

from .admin_login import register_admin_login
from .admin_shipments import register_admin_shipments
from .health import register_health
from .layout import register_layout
from .pages import register_pages


def register_all(app: Any) -> None:
    register_layout(app)
    register_pages(app)
    register_admin_login(app)
    register_admin_shipments(app)
    register_health(app)

__all__ = ["register_all"]
