"""
Input validation utilities for the sales pipeline.

Provides reusable validation functions for object keys, prefixes and batch
names so that storage locations cannot escape their bucket.
"""

import re


class ValidationError(ValueError):
    """Raised when input validation fails."""
    pass


MAX_KEY_LENGTH = 1024


def validate_object_key(key: str, field_name: str = "key") -> str:
    """
    Validate an object key.

    Keys are "/"-separated relative paths inside a bucket.

    Args:
        key: The object key to validate
        field_name: Name of the field (for error messages)

    Returns:
        The validated key

    Raises:
        ValidationError: If validation fails

    Examples:
        >>> validate_object_key("uploads/sales.csv")
        'uploads/sales.csv'
        >>> validate_object_key("../etc/passwd")  # doctest: +SKIP
        ValidationError: key contains path traversal segments (..)
    """
    if not key or not isinstance(key, str):
        raise ValidationError(f"{field_name} must be a non-empty string")

    if key.startswith("/"):
        raise ValidationError(f"{field_name} must be relative to the bucket (no leading /)")

    # Check for null bytes (security)
    if "\x00" in key:
        raise ValidationError(f"{field_name} contains null bytes")

    if ".." in key.split("/"):
        raise ValidationError(f"{field_name} contains path traversal segments (..)")

    if key.endswith("/"):
        raise ValidationError(f"{field_name} must name an object, not a prefix")

    if len(key) > MAX_KEY_LENGTH:
        raise ValidationError(f"{field_name} exceeds maximum length of {MAX_KEY_LENGTH} characters")

    return key


def validate_prefix(prefix: str, field_name: str = "prefix") -> str:
    """
    Validate a listing prefix.

    The empty prefix is allowed and means "everything".

    Examples:
        >>> validate_prefix("")
        ''
        >>> validate_prefix("Invalid/")
        'Invalid/'
    """
    if not isinstance(prefix, str):
        raise ValidationError(f"{field_name} must be a string")

    if prefix.startswith("/") or "\x00" in prefix or ".." in prefix.split("/"):
        raise ValidationError(f"{field_name} is not a valid key prefix: {prefix!r}")

    return prefix


def validate_bucket_name(bucket: str, field_name: str = "bucket") -> str:
    """
    Validate a bucket name.

    Bucket names contain lowercase letters, digits, dots and hyphens.

    Examples:
        >>> validate_bucket_name("sales-json")
        'sales-json'
    """
    if not bucket or not isinstance(bucket, str):
        raise ValidationError(f"{field_name} must be a non-empty string")

    bucket = bucket.strip()
    if not re.match(r'^[a-z0-9][a-z0-9.\-]{1,61}[a-z0-9]$', bucket):
        raise ValidationError(
            f"{field_name} contains invalid characters. "
            "Only lowercase letters, digits, dots and hyphens are allowed (3-63 characters)."
        )

    return bucket
