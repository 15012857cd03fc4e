"""Lifecycle module - state machines for accounts, postings and applications."""

from placement.modules.lifecycle.machines import (
    ACCOUNT_TRANSITIONS,
    APPLICATION_TRANSITIONS,
    POSTING_TRANSITIONS,
    AccountEvent,
    PostingEvent,
    next_account_status,
    next_application_status,
    next_posting_status,
    parse_application_status,
)

__all__ = [
    "ACCOUNT_TRANSITIONS",
    "APPLICATION_TRANSITIONS",
    "POSTING_TRANSITIONS",
    "AccountEvent",
    "PostingEvent",
    "next_account_status",
    "next_application_status",
    "next_posting_status",
    "parse_application_status",
]
