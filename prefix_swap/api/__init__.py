"""API routes and schemas."""

from prefix_swap.api.templates import router as templates_router

__all__ = [
    "templates_router",
]
