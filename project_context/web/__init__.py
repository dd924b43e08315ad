"""HTTP API for project-context (requires the ``web`` extra)."""

from project_context.web.app import create_app

__all__ = ["create_app"]
