"""Pytest configuration and fixtures."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from constgraph.backend import AnalysisClient
from constgraph.config import Settings, get_test_settings
from constgraph.layout import ForceSimulation, RenderModel, SimulationConfig, map_graph
from constgraph.models import DependencyGraph, FileNode, ProjectInfo


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 100.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def test_settings() -> Settings:
    """Test settings pointing at a fake backend."""
    return get_test_settings()


@pytest.fixture
def sample_graph_data() -> dict:
    """Backend payload: A depends on B, C and D depend on nothing shown."""
    return {
        "nodes": [
            {"name": "A", "value": "\"http://\" + HOST", "type": "string",
             "filePath": "config/urls.go", "lineNum": 3},
            {"name": "B", "value": "\"localhost\"", "type": "string",
             "filePath": "config/urls.go", "lineNum": 2},
            {"name": "C", "value": "5", "type": "number",
             "filePath": "config/limits.go", "lineNum": 7},
            {"name": "D", "value": "C * 2", "type": "number",
             "filePath": "config/limits.go", "lineNum": 8},
        ],
        "edges": [
            {"source": "A", "target": "B"},
            {"source": "D", "target": "C"},
        ],
    }


@pytest.fixture
def sample_graph(sample_graph_data) -> DependencyGraph:
    return DependencyGraph.from_dict(sample_graph_data)


@pytest.fixture
def sample_model(sample_graph) -> RenderModel:
    return map_graph(sample_graph)


@pytest.fixture
def simulation_config() -> SimulationConfig:
    return SimulationConfig()


@pytest.fixture
def settled_simulation(sample_model, simulation_config) -> ForceSimulation:
    """Simulation for the sample graph, already at rest."""
    simulation = ForceSimulation(sample_model, simulation_config)
    simulation.run_until_settled(400)
    return simulation


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def sample_file_tree() -> FileNode:
    return FileNode.from_dict({
        "name": "project",
        "path": "/project",
        "isDir": True,
        "children": [
            {
                "name": "config",
                "path": "/project/config",
                "isDir": True,
                "children": [
                    {"name": "urls.go", "path": "/project/config/urls.go", "isDir": False},
                    {"name": "limits.go", "path": "/project/config/limits.go", "isDir": False},
                ],
            },
            {"name": "main.go", "path": "/project/main.go", "isDir": False},
        ],
    })


@pytest.fixture
def mock_analysis_client(sample_graph, sample_file_tree) -> AnalysisClient:
    """Mock analysis client returning the sample graph for every request."""
    client = MagicMock(spec=AnalysisClient)
    client.base_url = "http://analysis.test/api"

    client.get_graph = AsyncMock(return_value=sample_graph)
    client.get_dependency_graph = AsyncMock(return_value=sample_graph)
    client.get_file_dependencies = AsyncMock(return_value=sample_graph)
    client.get_project_info = AsyncMock(
        return_value=ProjectInfo(project_path="/project", project_name="project")
    )
    client.get_file_tree = AsyncMock(return_value=sample_file_tree)
    client.close = AsyncMock()

    return client
