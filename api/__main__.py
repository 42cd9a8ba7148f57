"""
Entrypoint for running the API in development.
In production run create_app() under a WSGI server (gunicorn/uwsgi).
"""
import atexit
import logging
import os
import sys

from . import create_app
from .config import get_config
from services.exceptions import ConfigurationError


def main():
    logging.basicConfig(
        level=str(get_config(None).LOG_LEVEL).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        app = create_app()
    except ConfigurationError as exc:
        # refuse to start without a signing secret and a store
        logging.getLogger(__name__).critical("startup aborted: %s", exc)
        sys.exit(1)

    atexit.register(app.extensions["storage"].dispose)

    host = os.getenv("FLASK_RUN_HOST", "0.0.0.0")
    port = int(os.getenv("FLASK_RUN_PORT", "8000"))
    debug = os.getenv("FLASK_DEBUG", str(app.config.get("DEBUG", False))).lower() in ("1", "true", "yes")
    app.run(host=host, port=port, debug=debug)


if __name__ == "__main__":
    main()
