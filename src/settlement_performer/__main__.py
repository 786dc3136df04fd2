"""Entry point for the settlement performer.

Usage::

    python -m settlement_performer
"""

from __future__ import annotations

import uvicorn

from settlement_performer.config import get_settings


def main() -> None:
    """Serve the performer on the configured host and port."""
    settings = get_settings()
    uvicorn.run(
        "settlement_performer.app:create_app",
        factory=True,
        host=settings.server.host,
        port=settings.server.port,
        log_level=settings.server.log_level,
    )


if __name__ == "__main__":
    main()
