# -*- coding: utf-8 -*-
"""API routers, mounted by vidshare.main under API_PREFIX (health stays at root)."""
from vidshare.routes import (
    auth_routes,
    comment_routes,
    health_routes,
    like_routes,
    user_routes,
    video_routes,
)

API_ROUTERS = [
    auth_routes.router,
    user_routes.router,
    video_routes.router,
    comment_routes.router,
    like_routes.router,
]

__all__ = ["API_ROUTERS", "health_routes"]
