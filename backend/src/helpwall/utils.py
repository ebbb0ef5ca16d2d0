"""
Request and response helpers for the HelpWall handlers.
"""
import json
import datetime
from decimal import Decimal
from typing import Any, Dict, Optional
from .errors import HelpWallError

CORS_HEADERS = {
    'Access-Control-Allow-Origin': '*',
    'Access-Control-Allow-Credentials': True,
    'Content-Type': 'application/json'
}


class DecimalEncoder(json.JSONEncoder):
    """Render DynamoDB numbers: whole credits and minutes as ints, coordinates and fractions as floats."""

    def default(self, o):
        if isinstance(o, Decimal):
            return int(o) if o == o.to_integral_value() else float(o)
        return super().default(o)


def utc_timestamp() -> str:
    """ISO-8601 UTC timestamp; sorts lexicographically in index range keys."""
    return datetime.datetime.now(datetime.timezone.utc).isoformat()


def format_response(status_code: int, body: Any) -> Dict[str, Any]:
    """API Gateway proxy response with a JSON body."""
    return {
        'statusCode': status_code,
        'headers': dict(CORS_HEADERS),
        'body': json.dumps(body, cls=DecimalEncoder)
    }


def error_response(error: HelpWallError) -> Dict[str, Any]:
    """Response for a domain error, using the status and code the error carries."""
    return format_response(error.status_code, {
        'error': error.code,
        'message': str(error)
    })


def parse_body(event: dict) -> dict:
    """JSON object body of the request; anything else (missing, malformed, a list) reads as {}."""
    try:
        body = event.get('body') or '{}'
        if isinstance(body, str):
            body = json.loads(body)
        return body if isinstance(body, dict) else {}
    except (json.JSONDecodeError, TypeError):
        return {}


def get_path_param(event: dict, name: str) -> Optional[str]:
    return (event.get('pathParameters') or {}).get(name)


def get_query_param(event: dict, name: str, default: Optional[str] = None) -> Optional[str]:
    return (event.get('queryStringParameters') or {}).get(name, default)
