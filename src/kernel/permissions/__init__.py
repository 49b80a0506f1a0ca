"""
Access Core - context resolution and login predicates.
"""

from src.kernel.permissions.access_gate import AccessGate
from src.kernel.permissions.context_info import ContextInfo, get_context_info

__all__ = [
    "AccessGate",
    "ContextInfo",
    "get_context_info",
]
