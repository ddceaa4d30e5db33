import logging

from .entrypoints.fastapi_app import create_app

logging.getLogger("httpx").setLevel(logging.WARNING)

app = create_app()
