"""Application entry point for running the Tarefas API with Waitress."""
import logging
import os

from waitress import serve

from tarefas import app
from tarefas.config import get_int_env


if __name__ == "__main__":
    waitress_log_level = os.getenv("WAITRESS_LOG_LEVEL", "info").upper()
    logging.getLogger("waitress").setLevel(waitress_log_level)

    host = os.getenv("WAITRESS_HOST", "127.0.0.1")
    port = get_int_env("WAITRESS_PORT", 5000)
    threads = get_int_env("WAITRESS_THREADS", 8)
    connection_limit = get_int_env("WAITRESS_CONNECTION_LIMIT", 100)
    channel_timeout = get_int_env("WAITRESS_CHANNEL_TIMEOUT", 60)
    expose_tracebacks = os.getenv("WAITRESS_EXPOSE_TRACEBACKS", "0") == "1"

    app.logger.info(
        "Starting Waitress: host=%s port=%s threads=%s channel_timeout=%s",
        host,
        port,
        threads,
        channel_timeout,
    )

    serve(
        app,
        host=host,
        port=port,
        threads=threads,
        channel_timeout=channel_timeout,
        connection_limit=connection_limit,
        clear_untrusted_proxy_headers=True,
        max_request_body_size=app.config.get("MAX_CONTENT_LENGTH"),
        expose_tracebacks=app.debug or expose_tracebacks,
    )
