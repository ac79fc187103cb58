"""Entry point for running Tactic Infinity via ``python -m tacticinfinity``."""

from __future__ import annotations

import os

import uvicorn


def main() -> None:
    """Start the FastAPI-powered Tactic Infinity server."""

    host = os.environ.get("TACTICINFINITY_HOST", "0.0.0.0")
    port = int(os.environ.get("TACTICINFINITY_PORT", "8000"))
    uvicorn.run("tacticinfinity.api:app", host=host, port=port, reload=False)


if __name__ == "__main__":
    main()
