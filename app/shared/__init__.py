"""Shared utilities: telemetry and cross-cutting helpers.

Used by domain, application, and infrastructure. No business logic.
"""

from app.shared.utils import generate_cuid, utc_now

__all__ = ["generate_cuid", "utc_now"]
