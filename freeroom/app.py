"""The HTTP service: routes, the startup health ping and the command line."""

from __future__ import annotations

import argparse
import os
import threading
import time
import urllib.error
import urllib.request
from collections.abc import Sequence
from http import HTTPStatus

from flask import Flask, Response

from . import health
from .config import Settings, load_config
from .importer import import_classroom_data
from .logsetup import get_logger, setup_logging
from .middleware import register
from .models import DEFAULT_DB_NAME, connect

NOT_FOUND_MESSAGE = "The incorrect API route."
HEALTH_PATH = "/sd/health"
PING_TIMEOUT_SECONDS = 5
PING_INTERVAL_SECONDS = 1


def _text(result: health.CheckResult) -> Response:
    return Response(result.body, status=int(result.status), mimetype="text/plain")


def _not_found(_error: Exception) -> Response:
    return Response(NOT_FOUND_MESSAGE, status=HTTPStatus.NOT_FOUND, mimetype="text/plain")


def create_app(settings: Settings | None = None) -> Flask:
    """Build the web application with its hooks and health-check routes."""
    settings = settings if settings is not None else Settings()
    app = Flask("freeroom")

    runmode = str(settings.get("runmode", "") or "debug").lower()
    app.debug = runmode == "debug"
    app.testing = runmode == "test"

    register(app)
    app.register_error_handler(HTTPStatus.NOT_FOUND, _not_found)
    app.register_error_handler(HTTPStatus.METHOD_NOT_ALLOWED, _not_found)

    app.add_url_rule(HEALTH_PATH, "health", lambda: _text(health.health_check()))
    app.add_url_rule("/sd/disk", "disk", lambda: _text(health.disk_check()))
    app.add_url_rule("/sd/cpu", "cpu", lambda: _text(health.cpu_check()))
    app.add_url_rule("/sd/ram", "ram", lambda: _text(health.ram_check()))
    return app


def ping_server(url: str, max_count: int) -> None:
    """Poll ``url`` + ``/sd/health`` until it answers 200.

    Tries ``max_count`` times a second apart and raises ``RuntimeError``
    if the server never answers.
    """
    logger = get_logger()
    for _ in range(max_count):
        try:
            with urllib.request.urlopen(url + HEALTH_PATH, timeout=PING_TIMEOUT_SECONDS) as response:
                if response.status == HTTPStatus.OK:
                    return
        except (urllib.error.URLError, OSError, ValueError):
            pass
        logger.info("Waiting for the router, retry in 1 second.")
        time.sleep(PING_INTERVAL_SECONDS)
    raise RuntimeError("Cannot connect to the router.")


def _ping_or_exit(url: str, max_count: int) -> None:
    logger = get_logger()
    try:
        ping_server(url, max_count)
    except RuntimeError as exc:
        logger.critical(
            "The router has no response, or it might took too long to start up.",
            extra={"fields": {"reason": str(exc)}},
        )
        os._exit(1)
    logger.info("The router has been deployed successfully.")


def _split_addr(addr: str) -> tuple[str, int]:
    host, _, port = addr.rpartition(":")
    return host or "0.0.0.0", int(port) if port else 80


def main(argv: Sequence[str] | None = None) -> int:
    """Run the service, or import handbook data when ``--path`` is given."""
    parser = argparse.ArgumentParser(prog="freeroom", description="Free classroom service.")
    parser.add_argument("-c", "--config", default="", help="apiserver config file path.")
    parser.add_argument("-p", "--path", default="", help="Excel file path.")
    args = parser.parse_args(argv)

    settings = load_config(args.config or None)
    logger = setup_logging()

    db_url = str(settings.get("db.url", "") or "")
    db_name = str(settings.get("db.name", DEFAULT_DB_NAME) or DEFAULT_DB_NAME)
    with connect(db_url, db_name) as store:
        if args.path:
            import_classroom_data(args.path, store)
            return 0

        app = create_app(settings)

        ping = threading.Thread(
            target=_ping_or_exit,
            args=(str(settings.get("url", "")), int(settings.get("max_ping_count", 0) or 0)),
            daemon=True,
        )
        ping.start()

        addr = str(settings.get("addr", "") or "")
        logger.info("Start to listening the incoming requests on http address: %s", addr)
        host, port = _split_addr(addr)
        app.run(host=host, port=port, use_reloader=False)
    return 0