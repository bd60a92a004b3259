"""Run the API server: ``python -m userlists``.

Host, port, log level and backend come from the environment
(see userlists.config).
"""

from __future__ import annotations

import logging

import uvicorn

from userlists.api.app import create_app
from userlists.config import load_settings


def main() -> None:
    settings = load_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger(__name__).info(
        f"Starting on http://{settings.host}:{settings.port} "
        f"({settings.resolved_backend} backend)"
    )
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    main()
