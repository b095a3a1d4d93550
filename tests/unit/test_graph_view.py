"""Unit tests for the graph view's loading and display states."""

import asyncio
from unittest.mock import AsyncMock

import pytest

from constgraph.backend import AnalysisServiceError
from constgraph.models import DependencyGraph, FileNode, GraphValidationError
from constgraph.view import DisplayState, GraphView
from constgraph.view.graph_view import (
    EMPTY_FILE_MESSAGE,
    EMPTY_PROJECT_MESSAGE,
    FILE_ERROR_MESSAGE,
    PROJECT_ERROR_MESSAGE,
)


@pytest.fixture
def view(mock_analysis_client) -> GraphView:
    return GraphView(mock_analysis_client, frame_interval=0)


def single_node_graph(name: str) -> DependencyGraph:
    return DependencyGraph.from_dict({"nodes": [{"name": name, "type": "string"}]})


class TestLoading:
    """Tests for selection-driven loading."""

    def test_from_settings(self, test_settings, mock_analysis_client) -> None:
        settings = test_settings.model_copy(
            update={"frame_rate": 30.0, "link_distance": 80.0, "zoom_max": 8.0}
        )
        view = GraphView.from_settings(settings, mock_analysis_client)

        assert view.client is mock_analysis_client
        assert view.frame_interval == pytest.approx(1 / 30)
        assert view.simulation_config.link_distance == 80.0
        assert view.interaction_config.zoom_max == 8.0

    def test_from_settings_builds_client(self, test_settings) -> None:
        view = GraphView.from_settings(test_settings)
        assert view.client.base_url == "http://analysis.test/api"
        assert view.frame_interval == pytest.approx(1 / 60)

    def test_initial_state(self, view) -> None:
        assert view.state == DisplayState.IDLE
        assert view.session is None
        assert view.title == "Project dependency graph"

    @pytest.mark.asyncio
    async def test_project_graph(self, view, mock_analysis_client) -> None:
        await view.select_file(None)

        mock_analysis_client.get_graph.assert_awaited_once_with(None)
        assert view.state == DisplayState.READY
        assert view.session is not None
        assert [n.id for n in view.session.model.nodes] == ["A", "B", "C", "D"]
        assert view.title == "Project dependency graph"

    @pytest.mark.asyncio
    async def test_file_graph(self, view, mock_analysis_client) -> None:
        await view.select_file("config/urls.go")

        mock_analysis_client.get_graph.assert_awaited_once_with("config/urls.go")
        assert view.title == "Dependency graph: config/urls.go"

    @pytest.mark.asyncio
    async def test_single_node_is_not_empty(self, view, mock_analysis_client) -> None:
        mock_analysis_client.get_graph.return_value = single_node_graph("A")
        await view.select_file("a.go")

        assert view.state == DisplayState.READY
        assert view.message is None
        assert len(view.session.model.nodes) == 1

    @pytest.mark.asyncio
    async def test_reselecting_same_file_does_not_refetch(self, view, mock_analysis_client) -> None:
        await view.select_file("a.go")
        await view.select_file("a.go")
        assert mock_analysis_client.get_graph.await_count == 1

    @pytest.mark.asyncio
    async def test_back_to_project(self, view, mock_analysis_client) -> None:
        await view.select_file("a.go")
        await view.select_file(None)
        assert mock_analysis_client.get_graph.await_args_list[-1].args == (None,)

    @pytest.mark.asyncio
    async def test_file_tree_selection_triggers_load(
        self, view, mock_analysis_client, sample_file_tree
    ) -> None:
        view.file_selection.select(sample_file_tree.find("/project/main.go"))
        await asyncio.wait({view._pending})

        mock_analysis_client.get_graph.assert_awaited_once_with("/project/main.go")
        assert view.selected_file == "/project/main.go"


class TestEmptyAndErrors:
    """Tests for empty results and failures."""

    @pytest.mark.asyncio
    async def test_empty_file_graph(self, view, mock_analysis_client) -> None:
        mock_analysis_client.get_graph.return_value = DependencyGraph()
        await view.select_file("a.go")

        assert view.state == DisplayState.EMPTY
        assert view.message == EMPTY_FILE_MESSAGE
        assert view.session is None

    @pytest.mark.asyncio
    async def test_empty_project_graph(self, view, mock_analysis_client) -> None:
        mock_analysis_client.get_graph.return_value = DependencyGraph()
        await view.select_file(None)

        assert view.state == DisplayState.EMPTY
        assert view.message == EMPTY_PROJECT_MESSAGE

    @pytest.mark.asyncio
    async def test_backend_error(self, view, mock_analysis_client) -> None:
        mock_analysis_client.get_graph.side_effect = AnalysisServiceError("boom", status_code=500)
        await view.select_file("a.go")

        assert view.state == DisplayState.ERROR
        assert view.message == FILE_ERROR_MESSAGE
        assert view.session is None

    @pytest.mark.asyncio
    async def test_malformed_graph(self, view, mock_analysis_client) -> None:
        mock_analysis_client.get_graph.side_effect = GraphValidationError("missing name")
        await view.select_file(None)

        assert view.state == DisplayState.ERROR
        assert view.message == PROJECT_ERROR_MESSAGE

    @pytest.mark.asyncio
    async def test_error_replaces_previous_graph(self, view, mock_analysis_client) -> None:
        await view.select_file("a.go")
        old = view.session

        mock_analysis_client.get_graph.side_effect = AnalysisServiceError("boom")
        await view.select_file("b.go")

        assert old.disposed
        assert view.session is None

    @pytest.mark.asyncio
    async def test_retry_after_error(self, view, mock_analysis_client) -> None:
        mock_analysis_client.get_graph.side_effect = AnalysisServiceError("boom")
        await view.select_file("a.go")

        mock_analysis_client.get_graph.side_effect = None
        await view.reload()

        assert view.state == DisplayState.READY


class TestConcurrency:
    """Tests for superseded and stale loads."""

    @pytest.mark.asyncio
    async def test_previous_graph_stays_while_loading(self, view, mock_analysis_client) -> None:
        await view.select_file("a.go")
        old = view.session

        release = asyncio.Event()

        async def slow_graph(file_path):
            await release.wait()
            return single_node_graph("NEW")

        mock_analysis_client.get_graph.side_effect = slow_graph
        task = view.request_file("b.go")
        await asyncio.sleep(0)

        assert view.state == DisplayState.LOADING
        assert view.session is old
        assert not old.disposed

        release.set()
        await task

        assert old.disposed
        assert view.session.model.nodes[0].id == "NEW"

    @pytest.mark.asyncio
    async def test_new_selection_cancels_pending(self, view, mock_analysis_client) -> None:
        never = asyncio.Event()

        async def graph_for(file_path):
            if file_path == "slow.go":
                await never.wait()
            return single_node_graph(file_path)

        mock_analysis_client.get_graph.side_effect = graph_for
        first = view.request_file("slow.go")
        await asyncio.sleep(0)
        await view.select_file("fast.go")

        assert first.cancelled()
        assert view.selected_file == "fast.go"
        assert view.session.model.nodes[0].id == "fast.go"

    @pytest.mark.asyncio
    async def test_stale_response_is_discarded(self, view, mock_analysis_client) -> None:
        """Test that a response for an older selection never replaces a newer one."""
        await view.select_file("new.go")
        current = view.session

        mock_analysis_client.get_graph.return_value = single_node_graph("OLD")
        await view._load(view._generation - 1, "old.go")

        assert view.session is current
        assert view.state == DisplayState.READY

    @pytest.mark.asyncio
    async def test_stale_error_is_discarded(self, view, mock_analysis_client) -> None:
        await view.select_file("new.go")

        mock_analysis_client.get_graph.side_effect = AnalysisServiceError("late")
        await view._load(view._generation - 1, "old.go")

        assert view.state == DisplayState.READY
        assert view.message is None


class TestDisplay:
    """Tests for header text and teardown."""

    @pytest.mark.asyncio
    async def test_hover_summary(self, view) -> None:
        await view.select_file(None)
        assert view.hover_summary is None

        session = view.session
        session.simulation.run_until_settled()
        session.pointer_move(*session.simulation.position_of("C"))

        assert view.hover_summary == "C - number"

    @pytest.mark.asyncio
    async def test_close(self, view) -> None:
        await view.select_file(None)
        session = view.session

        view.close()

        assert session.disposed
        assert view.session is None
        assert view.state == DisplayState.IDLE

    @pytest.mark.asyncio
    async def test_load_project(self, view) -> None:
        await view.load_project()
        assert view.project.project_name == "project"
        assert view.file_tree.find("/project/main.go") is not None

    @pytest.mark.asyncio
    async def test_load_project_malformed_tree_is_not_fatal(self, view, mock_analysis_client) -> None:
        async def malformed_tree():
            return FileNode.from_dict({"path": "/p", "children": 5})

        mock_analysis_client.get_file_tree = AsyncMock(side_effect=malformed_tree)
        await view.load_project()

        assert view.project is None
        assert view.file_tree is None

    @pytest.mark.asyncio
    async def test_load_project_failure_is_not_fatal(self, view, mock_analysis_client) -> None:
        mock_analysis_client.get_file_tree = AsyncMock(side_effect=AnalysisServiceError("down"))
        await view.load_project()
        assert view.project is None
        assert view.file_tree is None
