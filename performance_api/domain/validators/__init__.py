"""Domain validators. Pure validation functions."""

from performance_api.domain.validators.account_validator import (
    as_utc_bound,
    validate_date_range,
    validate_department,
    validate_password,
    validate_search_query,
)

__all__ = [
    "as_utc_bound",
    "validate_date_range",
    "validate_department",
    "validate_password",
    "validate_search_query",
]
