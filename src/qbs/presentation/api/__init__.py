"""FastAPI application for the QB Securiegnty auth backend."""

from qbs.presentation.api.app import create_app

__all__ = ["create_app"]
