"""Gunicorn configuration for the idshield service.

One request per worker thread (gthread); handlers share only read-only
configuration, so threads need no locking.

Run with:
    gunicorn -c gunicorn.conf.py "idshield.flask_app:create_app()"
"""
import os

bind = f"0.0.0.0:{os.environ.get('APP_SERVER_PORT', '8080')}"
worker_class = "gthread"
workers = int(os.environ.get("GUNICORN_WORKERS", "2"))
threads = int(os.environ.get("GUNICORN_THREADS", "8"))

# Keycloak calls are bounded by PROVIDER_TIMEOUT (10s each, two per request)
timeout = int(os.environ.get("GUNICORN_TIMEOUT", "30"))
graceful_timeout = 10

accesslog = "-"
errorlog = "-"
loglevel = os.environ.get("LOG_LEVEL", "info").lower()


def post_fork(server, worker):
    """Called just after a worker has been forked."""
    config_file = os.environ.get("IDSHIELD_CONFIG_FILE")
    if config_file and not os.path.exists(config_file):
        worker.log.warning(f"IDSHIELD_CONFIG_FILE={config_file} does not exist; using environment only")
    worker.log.info(f"Worker {worker.pid} ready ({threads} threads)")
