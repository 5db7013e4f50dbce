"""
Run the API with uvicorn: `python -m event_registration` or `event-registration`.

Apply migrations first with `alembic upgrade head`.
"""

import uvicorn

from event_registration.core.config import get_settings


def main():
    settings = get_settings()
    # Auto-reload only outside production
    reload_mode = settings.DEBUG and settings.ENVIRONMENT != "production"
    uvicorn.run(
        "event_registration.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=reload_mode,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
