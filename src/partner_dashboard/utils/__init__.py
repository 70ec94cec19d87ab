"""
Utility functions and helpers
"""
from partner_dashboard.utils.logging import get_logger, app_logger, get_shared_logger

__all__ = ["get_logger", "app_logger", "get_shared_logger"]
