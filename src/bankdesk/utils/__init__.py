"""Utility functions for bankdesk."""

from bankdesk.utils.date_parser import parse_date
from bankdesk.utils.amount_parser import parse_amount
from bankdesk.utils.account_resolver import resolve_account

__all__ = ["parse_date", "parse_amount", "resolve_account"]
