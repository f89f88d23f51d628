"""
WSGI entrypoint. In production, point your server (gunicorn/uwsgi) here:

    gunicorn 'wsgi:app' --bind 0.0.0.0:5000

Run a single worker: the logging session lives in process memory.
"""

from plogapp import create_app

app = create_app()
