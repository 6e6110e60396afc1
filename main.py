"""Entrypoint to run the FastAPI service."""

from __future__ import annotations

import logging

import uvicorn

from ssr_panel.config import get_settings


def main() -> None:
    logging.basicConfig(level=get_settings().log_level)
    uvicorn.run("ssr_panel.api:app", host="0.0.0.0", port=8000, reload=False)


if __name__ == "__main__":
    main()
