"""Database access layer (DAL) for the account service.

This sub-package wraps the embedded store file so that callers only deal with
``Account`` records and typed errors, never with the engine itself.
"""

from .exceptions import (
    AccountDecodeError,
    AccountNotFoundError,
    BucketInitError,
    BucketMissingError,
    FatalOpenError,
    StoreError,
    StoreNotOpenError,
    WriteError,
)
from .models import Account, SeedResult
from .store import ACCOUNT_BUCKET, AccountStore

__all__ = [
    "ACCOUNT_BUCKET",
    "Account",
    "AccountDecodeError",
    "AccountNotFoundError",
    "AccountStore",
    "BucketInitError",
    "BucketMissingError",
    "FatalOpenError",
    "SeedResult",
    "StoreError",
    "StoreNotOpenError",
    "WriteError",
]
