from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def configure_logging(level: str | int = "INFO") -> None:
    """Configure the root logger once for the server and the CLI.

    Third-party HTTP loggers are held at WARNING so request bodies and
    connection chatter from httpx/openai do not flood the output.
    """

    root = logging.getLogger()
    root.setLevel(level if isinstance(level, int) else level.upper())

    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("openai").setLevel(logging.WARNING)

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    # Avoid duplicate handlers when called more than once (reload, tests).
    root.handlers.clear()
    root.addHandler(handler)
