# vidshare/start.py: uvicorn entrypoint
import os

import uvicorn


def run():
    """Start the VidShare API using uvicorn with sane defaults."""
    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "5000"))

    log_level = os.getenv("LOG_LEVEL", "info").lower()

    env = os.getenv("ENVIRONMENT", "production").lower()
    debug = os.getenv("DEBUG", "0").lower() in {"1", "true", "yes"}

    # Auto-reload only in dev
    reload_enabled = env in {"dev", "development"} or debug

    uvicorn.run(
        "vidshare.main:app",
        host=host,
        port=port,
        log_level=log_level,
        reload=reload_enabled,
        proxy_headers=True,
        forwarded_allow_ips="*",
    )


if __name__ == "__main__":
    run()
