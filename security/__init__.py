"""
Request guards for the parse endpoint.

  security.request_validation  — input validation
  security.rate_limiter        — per-user fixed-window rate limiting
"""
from security.request_validation import (
    MAX_STORAGE_PATH_LENGTH,
    RequestValidationError,
    ValidationResult,
    check_parse_request,
    validate_parse_request,
)
from security.rate_limiter import (
    InMemoryRateLimiter,
    RateLimitExceeded,
    RateLimiter,
    RedisRateLimiter,
    create_rate_limiter,
)

__all__ = [
    "MAX_STORAGE_PATH_LENGTH",
    "RequestValidationError",
    "ValidationResult",
    "check_parse_request",
    "validate_parse_request",
    "InMemoryRateLimiter",
    "RateLimitExceeded",
    "RateLimiter",
    "RedisRateLimiter",
    "create_rate_limiter",
]
