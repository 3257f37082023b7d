"""
ASGI config for the Task Manager API.

Serves traditional ASGI servers (Uvicorn, Daphne) and, through Mangum,
AWS Lambda behind API Gateway.
"""
import os

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings')

from django.core.asgi import get_asgi_application
from mangum import Mangum

# Initialize Django at module load time so the database configuration is
# built once per process, not per request.
application = get_asgi_application()


# =============================================================================
# Lambda Handler (via Mangum)
# =============================================================================

_lambda_handler = None


def get_lambda_handler():
    """
    Returns the Mangum-wrapped handler for AWS Lambda, built on first use.
    """
    global _lambda_handler
    if _lambda_handler is None:
        _lambda_handler = Mangum(application, lifespan="off")
    return _lambda_handler


def lambda_handler(event, context):
    """
    AWS Lambda entry point for HTTP requests.
    """
    return get_lambda_handler()(event, context)
