from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def setup_logging(level: str = "INFO") -> None:
    resolved = getattr(logging, (level or "INFO").upper(), logging.INFO)
    logging.basicConfig(level=resolved, format=LOG_FORMAT)
    # discord.py is chatty at INFO; keep its gateway noise down
    logging.getLogger("discord").setLevel(max(resolved, logging.WARNING))
    logging.getLogger("localvoicemod").setLevel(resolved)
