"""
Shared module - Model base, service errors and transaction coordination.
"""

from placement.modules.shared.models import BaseModel, enum_values, utcnow
from placement.modules.shared.transaction import atomic

__all__ = ["BaseModel", "atomic", "enum_values", "utcnow"]
