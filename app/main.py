from __future__ import annotations

import argparse
import logging
import sys
import uuid

import uvicorn

from app.api.http_app import build_app
from app.config import intake_settings_from_env
from app.logging_setup import configure_logging
from app.services.bootstrap import build_runtime_container

ROLE = "api"


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    settings = intake_settings_from_env()
    parser = argparse.ArgumentParser(description="Submission intake service")
    parser.add_argument("--host", default=settings.host)
    parser.add_argument("--port", type=int, default=settings.port)
    parser.add_argument(
        "--dry-run-startup",
        action="store_true",
        help="Validate configuration and exit",
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable code reload (dev mode)",
    )
    return parser.parse_args(argv)


def create_runtime_app() -> object:
    run_id = str(uuid.uuid4())
    configure_logging()
    container = build_runtime_container()
    return build_app(
        role=ROLE,
        run_id=run_id,
        api_deps=container.api_deps,
        on_startup=container.on_startup,
        on_shutdown=container.on_shutdown,
    )


def run(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    if not 0 < args.port < 65536:
        sys.stderr.write(f"ERROR: invalid port {args.port}\n")
        return 2

    configure_logging()
    run_id = str(uuid.uuid4())
    logger = logging.getLogger("runtime")

    container = build_runtime_container()
    logger.info(
        "runtime initialized",
        extra={"role": ROLE, "service": ROLE, "run_id": run_id},
    )

    if args.dry_run_startup:
        logger.info(
            "dry-run startup complete",
            extra={"role": ROLE, "service": ROLE, "run_id": run_id},
        )
        return 0

    if args.reload:
        uvicorn.run(
            "app.main:create_runtime_app",
            host=args.host,
            port=args.port,
            log_level="warning",
            reload=True,
            factory=True,
        )
    else:
        app = build_app(
            role=ROLE,
            run_id=run_id,
            api_deps=container.api_deps,
            on_startup=container.on_startup,
            on_shutdown=container.on_shutdown,
        )
        uvicorn.run(app, host=args.host, port=args.port, log_level="warning")
    return 0


if __name__ == "__main__":
    raise SystemExit(run())
