"""
Rate limit configuration for LLM provider calls.

Adjust these settings based on your API tier and usage patterns.
"""
import os

# Minimum spacing (seconds) between consecutive requests per provider credential.
# Free OpenRouter models allow roughly 20 requests/minute.
LLM_MIN_REQUEST_INTERVAL = {
    "openrouter": float(os.getenv("OPENROUTER_MIN_INTERVAL", "3.0")),
    "gemini": float(os.getenv("GEMINI_MIN_INTERVAL", "4.0")),
}

# Used for providers not listed above
DEFAULT_MIN_REQUEST_INTERVAL = 1.0

# Image search is not throttled client-side; Pexels allows 200 requests/hour
PEXELS_RESULTS_PER_SEARCH = 15


def get_min_interval(provider: str) -> float:
    """Return the configured minimum interval for a provider."""
    return LLM_MIN_REQUEST_INTERVAL.get(provider, DEFAULT_MIN_REQUEST_INTERVAL)
