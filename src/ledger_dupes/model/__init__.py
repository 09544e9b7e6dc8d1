from .transaction import Transaction
from .duplicate import (
    DuplicateCandidateGroup,
    GroupMember,
    ScanResult,
    failure_response,
)

__all__ = [
    "Transaction",
    "DuplicateCandidateGroup",
    "GroupMember",
    "ScanResult",
    "failure_response",
]
