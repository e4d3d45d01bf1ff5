"""ID Generation Utilities"""
import uuid
from typing import Optional


def generate_id(prefix: Optional[str] = None) -> str:
    """
    Generate a unique ID with optional prefix

    Args:
        prefix: Optional prefix for the ID (e.g., 'WFI', 'AUD')

    Returns:
        Unique ID string

    Examples:
        >>> generate_id('WFI')
        'WFI-a1b2c3d4e5f6'
        >>> generate_id()
        'a1b2c3d4e5f6'
    """
    unique_part = uuid.uuid4().hex[:12]

    if prefix:
        return f"{prefix}-{unique_part}"
    return unique_part


def generate_instance_id() -> str:
    """Generate workflow instance ID"""
    return generate_id("WFI")


def generate_audit_event_id() -> str:
    """Generate audit event ID"""
    return generate_id("AUD")
