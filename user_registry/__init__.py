"""User Registry service.

A small FastAPI service for managing user records with pagination, search
and WebSocket change notifications.
"""

__version__ = "1.0.0"
