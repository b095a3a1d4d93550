"""API routes for constgraph.

Provides:
- /health: API status and analysis backend reachability
- /viewer/layout: settled force layout of a graph as JSON
- /viewer/graph.svg: SVG snapshot of the same layout
"""

import logging

from fastapi import APIRouter, HTTPException, Query, Request
from fastapi.responses import Response
from pydantic import BaseModel

from constgraph.backend import AnalysisClient, AnalysisServiceError
from constgraph.config import Settings
from constgraph.layout import ForceSimulation, RenderModel, SimulationConfig, map_graph, render_frame
from constgraph.models import GraphValidationError
from constgraph.view.graph_view import EMPTY_FILE_MESSAGE, EMPTY_PROJECT_MESSAGE

logger = logging.getLogger(__name__)

router = APIRouter()


# ============================================================================
# Response Models
# ============================================================================


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    backend_connected: bool
    project_name: str | None = None


class LayoutNode(BaseModel):
    """A constant with its settled position."""

    id: str
    name: str
    value: str
    type: str
    file_path: str
    line_num: int
    color: str
    x: float
    y: float


class LayoutEdge(BaseModel):
    """A dependency between two laid-out constants."""

    source: str
    target: str


class LayoutResponse(BaseModel):
    """Settled layout for the project or a single file."""

    file: str | None = None
    nodes: list[LayoutNode] = []
    edges: list[LayoutEdge] = []
    ticks: int = 0
    settled: bool = True
    placeholder: str | None = None  # Set when the graph has no constants


# ============================================================================
# Helpers
# ============================================================================


def get_client(request: Request) -> AnalysisClient:
    """Get the analysis client from app state."""
    client = request.app.state.client
    if client is None:
        raise RuntimeError("Analysis client not initialized")
    return client


def get_settings(request: Request) -> Settings:
    """Get settings from app state."""
    return request.app.state.settings


async def fetch_model(request: Request, file_path: str | None) -> RenderModel:
    """Fetch and map a graph, turning backend failures into 502s."""
    client = get_client(request)
    try:
        graph = await client.get_graph(file_path)
        return map_graph(graph)
    except (AnalysisServiceError, GraphValidationError) as e:
        logger.error(f"Failed to fetch graph for {file_path or 'project'}: {e}")
        raise HTTPException(
            status_code=502,
            detail=f"Analysis backend error: {e}",
        )


def placeholder_for(model: RenderModel, file_path: str | None) -> str | None:
    """Placeholder text for an empty graph, None otherwise."""
    if not model.is_empty:
        return None
    return EMPTY_FILE_MESSAGE if file_path else EMPTY_PROJECT_MESSAGE


def settle(model: RenderModel, settings: Settings) -> tuple[ForceSimulation, int]:
    """Run a fresh simulation to rest (bounded by max_settle_ticks)."""
    simulation = ForceSimulation(model, SimulationConfig.from_settings(settings))
    ticks = simulation.run_until_settled(settings.max_settle_ticks)
    logger.debug(f"Layout of {len(model.nodes)} nodes took {ticks} ticks")
    return simulation, ticks


# ============================================================================
# Endpoints
# ============================================================================


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request) -> HealthResponse:
    """Health check endpoint."""
    project_name = None
    try:
        info = await get_client(request).get_project_info()
        project_name = info.project_name
        backend_connected = True
    except (AnalysisServiceError, GraphValidationError) as e:
        logger.warning(f"Analysis backend unavailable: {e}")
        backend_connected = False

    return HealthResponse(
        status="healthy" if backend_connected else "degraded",
        backend_connected=backend_connected,
        project_name=project_name,
    )


@router.get("/viewer/layout", response_model=LayoutResponse)
async def get_layout(
    request: Request,
    file: str | None = Query(default=None, description="Scope the graph to one file"),
) -> LayoutResponse:
    """
    Settled layout of the dependency graph.

    Without `file` the whole project graph is laid out.
    """
    model = await fetch_model(request, file)
    if model.is_empty:
        return LayoutResponse(file=file, placeholder=placeholder_for(model, file))

    simulation, ticks = settle(model, get_settings(request))
    positions = simulation.positions
    return LayoutResponse(
        file=file,
        nodes=[
            LayoutNode(
                id=node.id,
                name=node.name,
                value=node.value,
                type=node.type,
                file_path=node.file_path,
                line_num=node.line_num,
                color=node.color,
                x=round(float(positions[i, 0]), 2),
                y=round(float(positions[i, 1]), 2),
            )
            for i, node in enumerate(model.nodes)
        ],
        edges=[LayoutEdge(source=e.source.id, target=e.target.id) for e in model.edges],
        ticks=ticks,
        settled=simulation.settled,
    )


@router.get("/viewer/graph.svg")
async def get_graph_svg(
    request: Request,
    file: str | None = Query(default=None, description="Scope the graph to one file"),
) -> Response:
    """SVG snapshot of the settled layout."""
    settings = get_settings(request)
    model = await fetch_model(request, file)
    simulation, _ = settle(model, settings)
    frame = render_frame(
        model,
        simulation.positions,
        settings.viewport_width,
        settings.viewport_height,
        message=placeholder_for(model, file),
    )
    return Response(content=frame.to_svg(), media_type="image/svg+xml")
