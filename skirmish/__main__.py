"""Run the arena server: ``python -m skirmish``."""

from __future__ import annotations

import logging

import uvicorn

from .config import ServerConfig


def main() -> None:
    config = ServerConfig.from_env()
    logging.basicConfig(
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
        level=config.log_level,
    )
    uvicorn.run("skirmish.server:app", host=config.host, port=config.port, log_level=config.log_level.lower())


if __name__ == "__main__":
    main()
