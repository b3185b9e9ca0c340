"""Mini README: Interactive interfaces for the budget desk.

Exports the FastAPI application factory serving the JSON API and the HTML
overview. The command line entry point lives in ``main_budget_desk.py``.
"""

from .web_app import calculation_payload, create_application

__all__ = ["calculation_payload", "create_application"]
