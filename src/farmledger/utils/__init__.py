"""Utility functions for farmledger."""

from farmledger.utils.date_parser import parse_date
from farmledger.utils.amount_parser import parse_amount
from farmledger.utils.money import round_money, format_money

__all__ = ["parse_date", "parse_amount", "round_money", "format_money"]
