"""
FastAPI API routes and endpoints.

- routes.py: POST /api/categorize, GET /health, GET /version
- dependencies.py: Process-wide service singletons and the orchestrator
- models.py: API-specific request/response models
- error_handlers.py: Last-resort exception handlers
- middleware.py: Request id tracing
"""

from transcript_labeler.api import dependencies, error_handlers, models
from transcript_labeler.api.routes import router

__all__ = [
    "router",
    "dependencies",
    "error_handlers",
    "models",
]
