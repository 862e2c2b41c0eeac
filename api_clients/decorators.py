# Decorators for API client functions
import logging
import requests
import functools

logger = logging.getLogger(__name__)


def _find_url(args, kwargs):
    """Finds the URL a wrapped call was made for, for log messages."""
    url_to_log = kwargs.get('url')
    if not url_to_log:
        for arg in args:
            if isinstance(arg, str) and arg.startswith('http'):
                url_to_log = arg
                break
    return url_to_log


def skip_on_fetch_error(handled=(), return_on_failure=None):
    """
    Decorator making a fetch failure non-fatal for the caller.

    The wrapped function is called exactly once (there is no retry). Any
    `requests.exceptions.RequestException`, or any exception type listed in
    `handled`, is logged and turned into `return_on_failure`. Other
    exceptions propagate.

    Args:
        handled (tuple): Additional exception types treated as fetch failures.
        return_on_failure: Value returned instead of raising.
    """
    caught = (requests.exceptions.RequestException,) + tuple(handled)

    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except caught as e:
                url_to_log = _find_url(args, kwargs)
                log_url_snippet = f"for {url_to_log[:120]}" if url_to_log else f"in {func.__name__}"
                logger.warning(f"Fetch failed {log_url_snippet} ({type(e).__name__}): {e}. Skipping.")
                response = getattr(e, 'response', None)
                if response is not None:
                    response.close()
                return return_on_failure

        return wrapper
    return decorator
