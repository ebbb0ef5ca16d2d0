"""
Authentication utilities for extracting the caller from Cognito tokens.
The authorizer has already verified the token; its `sub` claim is trusted as-is.
"""
from typing import Optional


def get_user_sub(event: dict) -> Optional[str]:
    """
    Extract user sub (unique ID) from Cognito authorizer claims.

    Args:
        event: API Gateway Lambda proxy event

    Returns:
        User sub string or None if not authenticated
    """
    try:
        return event['requestContext']['authorizer']['claims']['sub'] or None
    except (KeyError, TypeError):
        return None
