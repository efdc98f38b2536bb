"""
TaxReturn Assessment - Routers Package

FastAPI route handlers.

Routers:
- tax_return: assessment, CSV export and year parameters
"""

from app.routers import tax_return

__all__ = ["tax_return"]
