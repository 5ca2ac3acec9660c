"""
Client library for the stockroom API
"""

from .app_state import AppState
from .api_client import StockroomClient

__all__ = ['AppState', 'StockroomClient']
