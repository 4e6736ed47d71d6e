"""Shared page chrome.

Every template extends ``layout.html``; this module feeds it the site
name, navigation and footer links through a context processor.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List

from flask import request
from flask_babel import lazy_gettext as _l

from shiptrack import config
from shiptrack.utils.identity import is_admin_user
from shiptrack.utils.logging import get_logger

LOG = get_logger("shiptrack.layout")


@dataclass(frozen=True)
class NavLink:
    label: Any
    href: str


NAV_LINKS: List[NavLink] = [
    NavLink(_l("Home"), "/home"),
]

FOOTER_LINKS: List[NavLink] = [
    NavLink(_l("Home"), "/home"),
    NavLink(_l("Admin"), "/admin/login"),
]


def _is_active(link: NavLink) -> bool:
    path = request.path.rstrip("/") or "/"
    return path == link.href.rstrip("/")


def layout_context() -> Dict[str, Any]:
    return {
        "site_name": config.site_name(),
        "nav_links": [(link, _is_active(link)) for link in NAV_LINKS],
        "footer_links": FOOTER_LINKS,
        "is_admin": is_admin_user(),
        "current_year": datetime.now(timezone.utc).year,
    }


def register_layout(app: Any) -> None:
    if getattr(app, "_shiptrack_layout", False):
        return
    app.context_processor(layout_context)
    setattr(app, "_shiptrack_layout", True)
    LOG.debug("layout context processor registered")


__all__ = ["NavLink", "NAV_LINKS", "FOOTER_LINKS", "layout_context", "register_layout"]
