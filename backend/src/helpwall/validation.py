"""
Input validation shared by task creation and task edits.
All checks run before any write and raise ValidationError with a message
that is returned to the caller verbatim.
"""
from decimal import Decimal, InvalidOperation
from typing import Any, Dict
from .errors import ValidationError
from .models import EXPECTED_MINUTES_OPTIONS, NotifyTarget

# Seven decimal places is about a centimetre; DynamoDB numbers hold at most 38 digits
COORDINATE_STEP = Decimal('1e-7')


def require_text(value: Any, field: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f'{field} must not be empty')
    return value.strip()


def validate_expected_minutes(value: Any) -> int:
    # bool is an int subclass; True must not pass as 1 minute
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError('expected_minutes must be an integer')
    if value not in EXPECTED_MINUTES_OPTIONS:
        allowed = ', '.join(str(m) for m in EXPECTED_MINUTES_OPTIONS)
        raise ValidationError(f'expected_minutes must be one of {allowed}')
    return value


def _coordinate(location: Dict[str, Any], field: str, bound: int) -> Decimal:
    raw = location.get(field)
    if isinstance(raw, bool) or not isinstance(raw, (int, float, Decimal, str)):
        raise ValidationError(f'location.{field} must be a number')
    try:
        value = Decimal(str(raw))
    except InvalidOperation:
        raise ValidationError(f'location.{field} must be a number')
    if not value.is_finite() or not -bound <= value <= bound:
        raise ValidationError(f'location.{field} must be between -{bound} and {bound}')
    return value.quantize(COORDINATE_STEP)


def validate_location(location: Any) -> Dict[str, Decimal]:
    """
    Normalize a {lat, lng} mapping into Decimals DynamoDB can store.

    Args:
        location: Mapping with numeric `lat` and `lng`

    Returns:
        Dict with Decimal `lat` and `lng`
    """
    if not isinstance(location, dict):
        raise ValidationError('location must be an object with lat and lng')
    return {
        'lat': _coordinate(location, 'lat', 90),
        'lng': _coordinate(location, 'lng', 180)
    }


def validate_notify_target(value: Any) -> str:
    if value not in NotifyTarget.CHOICES:
        raise ValidationError(f"notify_target must be one of {', '.join(NotifyTarget.CHOICES)}")
    return value
