"""Launch script for the faction AI inspector."""

import argparse
import logging

import uvicorn

logger = logging.getLogger(__name__)


def main(argv=None):
    """Start the inspector server."""
    ap = argparse.ArgumentParser(prog="python -m faction_ai.inspector.run")
    ap.add_argument("--host", default="127.0.0.1")
    ap.add_argument("--port", type=int, default=8000)
    ap.add_argument("--reload", action="store_true")
    args = ap.parse_args(argv)

    logging.basicConfig(level=logging.INFO)
    logger.info("Faction AI inspector on http://%s:%d (Ctrl+C to stop)", args.host, args.port)

    uvicorn.run(
        "faction_ai.inspector.app:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level="info"
    )


if __name__ == "__main__":
    main()
