"""HTTP API for Wasi Listings."""

from .app import app

__all__ = ["app"]
