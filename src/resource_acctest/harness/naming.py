"""Unique resource names for parallel acceptance runs."""
import secrets

DEFAULT_PREFIX = "tf-acc-test"
_SUFFIX_DIGITS = 19


def random_with_prefix(prefix: str = DEFAULT_PREFIX) -> str:
    """Return ``<prefix>-<19 random digits>``."""
    suffix = ''.join(secrets.choice('0123456789') for _ in range(_SUFFIX_DIGITS))
    return f"{prefix}-{suffix}"


def has_test_prefix(name: str, prefix: str = DEFAULT_PREFIX) -> bool:
    return name.startswith(f"{prefix}-")
