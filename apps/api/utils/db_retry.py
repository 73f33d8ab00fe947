"""
Database retry and conflict handling for request handlers.

Transient connection failures (Supabase pooler drops, timeouts) are retried
with backoff. Write conflicts are rolled back and reported as retryable;
the sectoral synchronizer is idempotent so a client retry converges.
"""
import time
import functools

from flask import current_app, jsonify
from sqlalchemy.exc import (
    IntegrityError,
    InterfaceError,
    OperationalError,
    TimeoutError as SQLTimeoutError,
)
from sqlalchemy.orm.exc import StaleDataError

from apps.api import db


# Exceptions that indicate a connection issue (should retry)
RETRIABLE_EXCEPTIONS = (
    OperationalError,
    InterfaceError,
    SQLTimeoutError,
    ConnectionError,
    TimeoutError,
)

# Concurrent writes to the same row
CONFLICT_EXCEPTIONS = (
    IntegrityError,
    StaleDataError,
)


def _reset_session():
    try:
        db.session.rollback()
        db.session.remove()
    except Exception as exc:
        current_app.logger.debug("Session reset after DB error failed: %s", exc)


def with_db_retry(max_retries=3, initial_delay=1.0, backoff_factor=2.0):
    """
    Decorator that retries a route on database connection failures.

    Returns 503 once retries are exhausted and 409 (retryable) on write
    conflicts.

    Usage:
        @with_db_retry(max_retries=3)
        def my_route():
            ...
    """
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            last_exception = None
            delay = initial_delay

            for attempt in range(max_retries + 1):
                try:
                    return func(*args, **kwargs)
                except CONFLICT_EXCEPTIONS as e:
                    db.session.rollback()
                    current_app.logger.warning("Write conflict in %s: %s", func.__name__, str(e)[:200])
                    return jsonify({
                        'error': 'Conflicting update, please retry',
                        'retryable': True,
                        'details': str(e)[:200] if current_app.debug else None
                    }), 409
                except RETRIABLE_EXCEPTIONS as e:
                    last_exception = e
                    if attempt < max_retries:
                        current_app.logger.warning(
                            "Database connection failed (attempt %s/%s): %s. Retrying in %.1fs...",
                            attempt + 1, max_retries + 1, str(e)[:100], delay
                        )
                        time.sleep(delay)
                        delay *= backoff_factor
                        _reset_session()
                    else:
                        current_app.logger.error(
                            "Database connection failed after %s attempts: %s", max_retries + 1, e
                        )

            return jsonify({
                'error': 'Database connection temporarily unavailable',
                'message': 'Please try again in a few moments',
                'retryable': True,
                'details': str(last_exception)[:200] if current_app.debug else None
            }), 503

        return wrapper
    return decorator
