"""
HelpWall logger.
One `helpwall` logger shared by the library modules and every handler.
"""
import logging
import json

logger = logging.getLogger('helpwall')
logger.setLevel(logging.INFO)

# Lambda reuses the process between invocations
if not logger.handlers:
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    ))
    logger.addHandler(handler)

# Request fields worth a log line; bodies carry thank-you messages, claims carry identity details
LOGGED_EVENT_FIELDS = ('httpMethod', 'resource', 'pathParameters', 'queryStringParameters')


def log_event(event: dict) -> None:
    """Log the route of an API Gateway request and the member making it."""
    try:
        summary = {k: event.get(k) for k in LOGGED_EVENT_FIELDS if event.get(k) is not None}
        claims = (event.get('requestContext') or {}).get('authorizer', {}).get('claims') or {}
        if claims.get('sub'):
            summary['caller'] = claims['sub']
        logger.info(f"Request: {json.dumps(summary, default=str)}")
    except Exception as e:
        logger.warning(f"Could not log event: {e}")
