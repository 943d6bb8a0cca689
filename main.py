"""
main.py: Server launcher and entry point.

    python main.py

This file does NOT contain application logic. See app.py for the FastAPI
application, service wiring, and startup sequence.

Direct uvicorn usage:
    uvicorn app:app --reload
"""

from __future__ import annotations

import os

import uvicorn

from taskfit.utils.config import get_settings


HOST = os.getenv("TASKFIT_HOST", "127.0.0.1")
PORT = int(os.getenv("TASKFIT_PORT", "8000"))


def main() -> None:
    settings = get_settings()
    print("=" * 60)
    print(f"  {settings.app_name} v{settings.app_version}")
    print("=" * 60)
    print(f"  Server   : http://{HOST}:{PORT}")
    print(f"  API docs : http://{HOST}:{PORT}/docs")
    print(f"  Database : {settings.database_path}")
    print("=" * 60)
    print("  Press CTRL+C to stop\n")

    uvicorn.run(
        "app:app",
        host=HOST,
        port=PORT,
        reload=os.getenv("TASKFIT_RELOAD", "0") == "1",
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
