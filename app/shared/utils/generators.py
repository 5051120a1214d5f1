"""Identifier generation for catalog items and domain events."""

from cuid2 import cuid_wrapper

_next_cuid = cuid_wrapper()


def generate_cuid() -> str:
    """Return a new CUID2: opaque, collision-resistant, never reused."""
    return str(_next_cuid())
