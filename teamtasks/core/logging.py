"""
Centralized logging configuration with Sentry integration.

Sets up the root logger and error tracking at startup and offers
capture_error() for handlers that turn failures into 500 responses.
"""

import logging
import sys
from typing import Any, Dict, Optional

import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration

from teamtasks.core.config import settings

SENSITIVE_FIELDS = [
    'password', 'new_password', 'old_password', 'token', 'code',
    'authorization', 'password_hash', 'access_token', 'secret',
]
SENSITIVE_HEADERS = ['authorization', 'cookie', 'x-auth-token']


def init_sentry() -> bool:
    """
    Initialize Sentry for error tracking.

    Only initializes if SENTRY_DSN is configured.

    Returns:
        True when Sentry was initialized
    """
    if not settings.SENTRY_DSN:
        logging.info("SENTRY_DSN not configured. Sentry disabled.")
        return False

    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        environment=settings.SENTRY_ENVIRONMENT or settings.MODE,
        traces_sample_rate=settings.SENTRY_TRACES_SAMPLE_RATE,
        integrations=[
            FastApiIntegration(),
            SqlalchemyIntegration(),
        ],
        before_send=filter_sensitive_data,
        send_default_pii=False,
        attach_stacktrace=True,
        max_breadcrumbs=50,
    )
    logging.info(f"Sentry initialized for environment: {settings.SENTRY_ENVIRONMENT or settings.MODE}")
    return True


def filter_sensitive_data(event: Dict[str, Any], hint: Optional[Dict[str, Any]] = None) -> Optional[Dict[str, Any]]:
    """
    Mask passwords, tokens and backup codes in request bodies and headers
    before an event leaves the process.

    Args:
        event: Sentry event dictionary
        hint: Sentry hint dictionary

    Returns:
        The event with sensitive values replaced by '[FILTERED]'
    """
    request = event.get('request') or {}

    data = request.get('data')
    if isinstance(data, dict):
        for field in SENSITIVE_FIELDS:
            if field in data:
                data[field] = '[FILTERED]'

    headers = request.get('headers')
    if isinstance(headers, dict):
        for header in list(headers):
            if header.lower() in SENSITIVE_HEADERS:
                headers[header] = '[FILTERED]'

    return event


def capture_error(
    error: Exception,
    context: Optional[Dict[str, Any]] = None,
    user: Optional[Dict[str, Any]] = None,
    tags: Optional[Dict[str, str]] = None
) -> Optional[str]:
    """
    Send an exception to Sentry with extra context.

    Args:
        error: Exception to capture
        context: Named context blocks to attach
        user: User information (id, username)
        tags: Tags to attach to the event

    Returns:
        Sentry event ID, or None when Sentry is not configured
    """
    with sentry_sdk.new_scope() as scope:
        if user:
            scope.set_user({
                "id": user.get("id"),
                "username": user.get("username"),
            })
        if context:
            for key, value in context.items():
                scope.set_context(key, value)
        if tags:
            for key, value in tags.items():
                scope.set_tag(key, value)

        return sentry_sdk.capture_exception(error)


def setup_logging():
    """
    Configure the root logger: one stdout handler at LOG_LEVEL.
    """
    log_level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    logger = logging.getLogger()
    logger.setLevel(log_level)
    logger.handlers = []

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    ))
    logger.addHandler(console_handler)

    logging.info(f"Logging configured with level: {settings.LOG_LEVEL}")
