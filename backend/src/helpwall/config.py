"""
Configuration module for Lambda handlers.
Loads all environment variables needed by the HelpWall backend.
"""
import os


class Config:
    """Centralized configuration from environment variables."""

    # AWS Region
    AWS_REGION = os.environ.get('AWS_REGION', 'us-east-1')

    # DynamoDB Tables
    TASKS_TABLE = os.environ.get('TASKS_TABLE', 'helpwall-tasks')
    LEDGER_TABLE = os.environ.get('LEDGER_TABLE', 'helpwall-time-credit-ledger')
    USERS_TABLE = os.environ.get('USERS_TABLE', 'helpwall-users')
    GRATITUDE_TABLE = os.environ.get('GRATITUDE_TABLE', 'helpwall-gratitude-cards')

    # Notification dispatch (external Lambda). Empty disables dispatch.
    NOTIFY_FUNCTION_NAME = os.environ.get('NOTIFY_FUNCTION_NAME', '')


config = Config()
