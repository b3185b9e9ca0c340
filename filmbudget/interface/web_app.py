"""Mini README: FastAPI service for the film budget desk.

Structure:
    * create_application - application factory wiring routes and templates.
    * /api/projects... - CRUD over projects and positions (partial updates).
    * /api/projects/{id}/calculation|comparison|export.csv - derived views.
    * / - HTML overview of active projects with their planned totals.

Derived values are recomputed from a fresh snapshot on every request, the
service keeps no calculation state between calls. Gateway ``KeyError``
becomes 404 and ``ValueError`` becomes 400.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import HTMLResponse, JSONResponse, Response
from fastapi.templating import Jinja2Templates

from ..calculation import ProjectSnapshot, compare, hotel_nights, position_sums, summarize
from ..configuration import get_settings
from ..export import BudgetExporter, format_currency, format_difference
from ..logging_utils import get_logger
from ..storage import BudgetGateway, create_gateway
from .schemas import PositionCreate, PositionUpdate, ProjectCreate, ProjectUpdate, ReorderRequest

LOGGER = get_logger(__name__)


def _not_found(error: KeyError) -> HTTPException:
    return HTTPException(status_code=404, detail=str(error.args[0] if error.args else error))


def _bad_request(error: ValueError) -> HTTPException:
    return HTTPException(status_code=400, detail=str(error))


def calculation_payload(snapshot: ProjectSnapshot) -> Dict[str, Any]:
    """Bundle the calculation view: category summary, hotel nights, row sums."""

    return {
        "project_id": snapshot.project_id,
        "summary": summarize(snapshot).as_dict(),
        "hotel_nights": hotel_nights(snapshot),
        "position_sums": position_sums(snapshot),
    }


def create_application(gateway: Optional[BudgetGateway] = None) -> FastAPI:
    """Create the FastAPI application; a gateway is opened from settings when omitted."""

    settings = get_settings()
    if gateway is None:
        gateway = create_gateway(
            settings.database_path, default_project_name=settings.default_project_name
        )

    app = FastAPI(title="Film Budget Desk", version="0.1.0")
    templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))
    templates.env.filters["currency"] = format_currency
    templates.env.filters["difference"] = format_difference
    exporter = BudgetExporter()

    def load_snapshot(project_id: str) -> ProjectSnapshot:
        try:
            return gateway.snapshot(project_id)
        except KeyError as error:
            raise _not_found(error) from error

    @app.get("/", response_class=HTMLResponse)
    def dashboard(request: Request) -> HTMLResponse:
        """Render active projects with their planned and actual totals."""

        overview: List[Dict[str, Any]] = []
        for project in gateway.list_projects(archived=False):
            snapshot = gateway.snapshot(project["id"])
            comparison = compare(snapshot)
            overview.append(
                {
                    "project": project,
                    "position_count": len(snapshot.positions),
                    "summary": summarize(snapshot),
                    "comparison": comparison,
                }
            )
        LOGGER.debug("Rendering dashboard with %s projects", len(overview))
        return templates.TemplateResponse(
            request,
            "dashboard.html",
            {"overview": overview, "environment": settings.environment},
        )

    @app.get("/api/projects")
    def list_projects(archived: bool = False) -> JSONResponse:
        return JSONResponse(gateway.list_projects(archived=archived))

    @app.get("/api/projects/{project_id}")
    def get_project(project_id: str) -> JSONResponse:
        try:
            return JSONResponse(gateway.get_project(project_id))
        except KeyError as error:
            raise _not_found(error) from error

    @app.post("/api/projects")
    def create_project(payload: Optional[ProjectCreate] = None) -> JSONResponse:
        """Create a project, named after the request or the configured default."""

        name = payload.name if payload is not None else None
        return JSONResponse(gateway.create_project(name))

    @app.put("/api/projects/{project_id}")
    def update_project(project_id: str, payload: ProjectUpdate) -> JSONResponse:
        """Apply only the fields present in the request body."""

        try:
            project = gateway.update_project(project_id, payload.model_dump(exclude_unset=True))
        except KeyError as error:
            raise _not_found(error) from error
        except ValueError as error:
            raise _bad_request(error) from error
        return JSONResponse(project)

    @app.delete("/api/projects/{project_id}")
    def delete_project(project_id: str) -> JSONResponse:
        try:
            gateway.delete_project(project_id)
        except KeyError as error:
            raise _not_found(error) from error
        return JSONResponse({"success": True})

    @app.post("/api/projects/{project_id}/positions")
    def add_position(project_id: str, payload: PositionCreate) -> JSONResponse:
        try:
            position = gateway.add_position(project_id, payload.type)
        except KeyError as error:
            raise _not_found(error) from error
        except ValueError as error:
            raise _bad_request(error) from error
        return JSONResponse(position)

    @app.put("/api/positions/{position_id}")
    def update_position(position_id: str, payload: PositionUpdate) -> JSONResponse:
        try:
            position = gateway.update_position(position_id, payload.model_dump(exclude_unset=True))
        except KeyError as error:
            raise _not_found(error) from error
        except ValueError as error:
            raise _bad_request(error) from error
        return JSONResponse(position)

    @app.delete("/api/positions/{position_id}")
    def delete_position(position_id: str) -> JSONResponse:
        try:
            gateway.delete_position(position_id)
        except KeyError as error:
            raise _not_found(error) from error
        return JSONResponse({"success": True})

    @app.put("/api/projects/{project_id}/reorder")
    def reorder_positions(project_id: str, payload: ReorderRequest) -> JSONResponse:
        """Persist a new display order after a drag-and-drop."""

        try:
            gateway.reorder_positions(project_id, [position.id for position in payload.positions])
        except KeyError as error:
            raise _not_found(error) from error
        return JSONResponse({"success": True})

    @app.get("/api/projects/{project_id}/calculation")
    def calculation(project_id: str) -> JSONResponse:
        return JSONResponse(calculation_payload(load_snapshot(project_id)))

    @app.get("/api/projects/{project_id}/comparison")
    def comparison(project_id: str) -> JSONResponse:
        snapshot = load_snapshot(project_id)
        payload = compare(snapshot).as_dict()
        payload["project_id"] = snapshot.project_id
        return JSONResponse(payload)

    @app.get("/api/projects/{project_id}/export.csv")
    def export_csv(project_id: str) -> Response:
        snapshot = load_snapshot(project_id)
        LOGGER.info("Exporting project %s as CSV", project_id)
        return Response(
            content=exporter.render(snapshot),
            media_type="text/csv; charset=utf-8",
            headers={"Content-Disposition": f'attachment; filename="budget-{project_id}.csv"'},
        )

    return app
