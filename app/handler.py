"""Serverless entry point.

Mangum translates API Gateway / Netlify function events into ASGI so the
FastAPI app runs unchanged. The schema is reconciled once per cold start;
lifespan is off because Mangum would otherwise run it on every invocation.
"""

import structlog
from mangum import Mangum

from app.main import app

logger = structlog.get_logger(__name__)

if not app.state.database.reconcile():
    logger.error("Continuing without a verified database connection")

_asgi_handler = Mangum(app, lifespan="off")


def handler(event, context):
    logger.debug(
        "Function invoked",
        method=event.get("httpMethod") or event.get("requestContext", {}).get("http", {}).get("method"),
        path=event.get("path") or event.get("rawPath"),
        body_type=type(event.get("body")).__name__,
        is_base64_encoded=event.get("isBase64Encoded", False),
    )
    return _asgi_handler(event, context)
