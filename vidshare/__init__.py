# vidshare/__init__.py
"""
VidShare backend package.

Layout:
    vidshare.config      settings (env chain + pydantic-settings)
    vidshare.db          engine / SessionLocal / Base / get_db
    vidshare.models      SQLAlchemy tables (User, Video, Comment, Like)
    vidshare.crud        queries + entity mutations
    vidshare.services    toggle protocol, engagement counters, media storage
    vidshare.routes      FastAPI routers
    vidshare.main        app factory (create_app) + ASGI app
"""

__version__ = "1.0.0"
