import os
import time
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeoutError
from typing import Any, Callable, Optional

from dotenv import load_dotenv
from supabase import Client, create_client

from agents.generation.exceptions import MissingConfigError
from setup_logging_optimized import get_logger

# Load environment variables
load_dotenv()

logger = get_logger(__name__)

# Errors after which the cached client's connection pool is suspect
_TRANSIENT_MARKERS = (
    "StreamReset",
    "UNEXPECTED_EOF_WHILE_READING",
    "EOF occurred in violation of protocol",
    "RemoteProtocolError",
    "ConnectionResetError",
    "ReadError",
)

_service_client: Optional[Client] = None

SUPABASE_TIMEOUT_SECONDS = 8.0


def get_supabase_credentials():
    url = os.getenv("SUPABASE_URL")
    # Use service key if available, otherwise fall back to anon key
    key = os.getenv("SUPABASE_SERVICE_KEY") or os.getenv("SUPABASE_KEY")
    return url, key


def is_supabase_configured() -> bool:
    url, key = get_supabase_credentials()
    return bool(url and key)


def get_supabase_client() -> Client:
    """
    Return the cached Supabase client (service key when available, to bypass RLS).

    Raises:
        MissingConfigError: if SUPABASE_URL or a key is not set
    """
    global _service_client

    url, key = get_supabase_credentials()
    if not url or not key:
        raise MissingConfigError("SUPABASE_URL", "SUPABASE_URL and SUPABASE_KEY environment variables must be set")

    if _service_client is None:
        _service_client = create_client(url, key)

    return _service_client


def reset_supabase_client() -> None:
    """Drop the cached client so the next call builds a fresh connection pool."""
    global _service_client
    _service_client = None
    logger.info("Supabase client has been reset")


def perform_supabase_operation_with_retry(
    operation: Callable[[], Any],
    description: str = "operation",
    max_attempts: int = 3,
    timeout_seconds: float = SUPABASE_TIMEOUT_SECONDS,
    retry_on_timeout: bool = True,
) -> Any:
    """
    Execute a blocking Supabase SDK operation with a per-attempt deadline and retries.

    Each attempt runs on its own worker thread. When the deadline passes the
    caller is released immediately and the worker is abandoned, not joined,
    so a hung request can still finish in the background.

    Non-idempotent writes pass ``retry_on_timeout=False``: a timed-out insert
    may already have been committed, so the timeout is raised on the spot
    instead of being retried into a duplicate row.

    Raises:
        The last exception if all attempts fail
    """
    last_error: Optional[BaseException] = None
    for attempt in range(1, max_attempts + 1):
        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="supabase")
        try:
            return executor.submit(operation).result(timeout=timeout_seconds)
        except FutureTimeoutError as e:
            last_error = e
            logger.warning(f"Supabase {description} timed out after {timeout_seconds}s on attempt {attempt}/{max_attempts}")
            reset_supabase_client()
            if not retry_on_timeout:
                raise
        except Exception as e:
            last_error = e
            message = str(e)
            logger.warning(f"Supabase {description} failed on attempt {attempt}/{max_attempts}: {message}")
            if any(marker in message for marker in _TRANSIENT_MARKERS):
                reset_supabase_client()
        finally:
            executor.shutdown(wait=False, cancel_futures=True)
        if attempt < max_attempts:
            time.sleep(0.2 * (2 ** (attempt - 1)))
    raise last_error
