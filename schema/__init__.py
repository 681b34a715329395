"""
schema - Fixed vocabularies and part-number formatting.

Public API:
    PART_STATUS_MAP, PART_STATUSES, PART_TYPES, ORDER_STATUSES, PERMISSIONS
    format_part_number(prefix, type, number) → 'PREFIX-P-0001'
    parse_part_number(text) → {prefix, type, part_number} | None
"""

from schema.statuses import (                                   # noqa: F401
    PART_STATUS_MAP, PART_STATUSES, PART_TYPES, PART_PRIORITY_MAP,
    ORDER_STATUSES, PERMISSIONS,
)
from schema.numbering import (                                  # noqa: F401
    format_part_number, parse_part_number, normalize_prefix, validate_prefix,
)
