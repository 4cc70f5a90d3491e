"""
Financial Records - Source Package

A record-keeping service for personal financial transactions: add,
update and delete records, then filter, summarize, average, forecast
and export them.

DESIGN PRINCIPLES:
1. Validate before touching the store
2. Fail early, fail visibly (an empty result is an error, not silence)
3. No silent corrections
4. Every call is auditable
5. Storage, clock and id generation are swappable
"""

__version__ = "1.0.0"
__author__ = "Financial Records Team"
