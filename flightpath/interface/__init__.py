"""Mini README: Interactive interfaces for Flight Path.

Exports the FastAPI application factory that powers the browser dashboard.
The Typer launcher in ``main_control_centre.py`` builds on it.
"""

from .web_app import create_application

__all__ = ["create_application"]
