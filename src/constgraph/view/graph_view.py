"""Graph view: the selected file drives which graph is fetched and shown.

Only one fetch matters at a time. A new selection cancels the pending
fetch and bumps a generation counter; any response that arrives for an
older generation is discarded. While a fetch is in flight the previous
graph stays on screen and keeps ticking.
"""

import asyncio
import logging
import time
from collections.abc import Callable
from enum import Enum

from constgraph.backend import AnalysisClient, AnalysisServiceError
from constgraph.config import Settings
from constgraph.layout.config import InteractionConfig, SimulationConfig
from constgraph.layout.mapper import map_graph
from constgraph.layout.render import Frame
from constgraph.models import FileNode, FileTreeSelection, GraphValidationError, ProjectInfo
from constgraph.view.session import GraphSession

logger = logging.getLogger(__name__)

PROJECT_TITLE = "Project dependency graph"
FILE_TITLE = "Dependency graph: {file_path}"
EMPTY_FILE_MESSAGE = "No constants or dependencies found in the selected file"
EMPTY_PROJECT_MESSAGE = (
    "No constants found in the project. "
    "Select a file in the explorer to display its dependency graph"
)
PROJECT_ERROR_MESSAGE = "Failed to load the dependency graph"
FILE_ERROR_MESSAGE = "Failed to load dependencies for the selected file"


class DisplayState(str, Enum):
    """What the view is currently showing."""

    IDLE = "idle"  # Nothing requested yet
    LOADING = "loading"
    ERROR = "error"  # Load failed, no graph shown
    EMPTY = "empty"  # Valid response without constants
    READY = "ready"


class GraphView:
    """Fetches graphs for the current selection and owns the active session."""

    def __init__(
        self,
        client: AnalysisClient,
        simulation_config: SimulationConfig | None = None,
        interaction_config: InteractionConfig | None = None,
        on_frame: Callable[[Frame], None] | None = None,
        frame_interval: float = 1 / 60,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.client = client
        self.simulation_config = simulation_config or SimulationConfig()
        self.interaction_config = interaction_config or InteractionConfig()
        self.on_frame = on_frame
        self.frame_interval = frame_interval
        self.clock = clock

        self.selected_file: str | None = None
        self.state = DisplayState.IDLE
        self.message: str | None = None
        self.session: GraphSession | None = None

        self.project: ProjectInfo | None = None
        self.file_tree: FileNode | None = None
        self.file_selection = FileTreeSelection(self.request_file)

        self._generation = 0
        self._pending: asyncio.Task | None = None

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        client: AnalysisClient | None = None,
        on_frame: Callable[[Frame], None] | None = None,
    ) -> "GraphView":
        """Build a view whose physics, interaction and frame rate come from settings."""
        return cls(
            client or AnalysisClient.from_settings(settings),
            SimulationConfig.from_settings(settings),
            InteractionConfig.from_settings(settings),
            on_frame=on_frame,
            frame_interval=1 / settings.frame_rate,
        )

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    @property
    def title(self) -> str:
        if self.selected_file:
            return FILE_TITLE.format(file_path=self.selected_file)
        return PROJECT_TITLE

    @property
    def hover_summary(self) -> str | None:
        """Header line for the hovered constant."""
        if self.session is None:
            return None
        hovered = self.session.controller.hovered_node_id
        if hovered is None:
            return None
        node = self.session.model.nodes[self.session.model.index_of(hovered)]
        return f"{node.name} - {node.type}"

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def request_file(self, file_path: str | None) -> asyncio.Task | None:
        """
        Change the selection and start loading its graph.

        Returns the load task, or None when the selection did not change.
        Must be called with a running event loop.
        """
        if file_path == self.selected_file and self.state is not DisplayState.IDLE:
            return None
        self.selected_file = file_path
        return self.reload()

    async def select_file(self, file_path: str | None) -> None:
        """Change the selection and wait until its graph (or a newer one) is applied."""
        task = self.request_file(file_path)
        if task is not None:
            await asyncio.wait({task})

    def reload(self) -> asyncio.Task:
        """Fetch the graph for the current selection, superseding any pending fetch."""
        self._generation += 1
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()

        self.state = DisplayState.LOADING
        self.message = None
        self._pending = asyncio.get_running_loop().create_task(
            self._load(self._generation, self.selected_file)
        )
        return self._pending

    async def _load(self, generation: int, file_path: str | None) -> None:
        try:
            graph = await self.client.get_graph(file_path)
            model = map_graph(graph)
        except (AnalysisServiceError, GraphValidationError) as e:
            if generation != self._generation:
                return
            logger.error(f"Failed to load graph for {file_path or 'project'}: {e}")
            self._replace_session(None)
            self.state = DisplayState.ERROR
            self.message = FILE_ERROR_MESSAGE if file_path else PROJECT_ERROR_MESSAGE
            return

        if generation != self._generation:
            logger.debug(f"Discarding stale graph response for {file_path or 'project'}")
            return

        if model.is_empty:
            self._replace_session(None)
            self.state = DisplayState.EMPTY
            self.message = EMPTY_FILE_MESSAGE if file_path else EMPTY_PROJECT_MESSAGE
            return

        session = GraphSession(
            model,
            self.simulation_config,
            self.interaction_config,
            on_frame=self.on_frame,
            frame_interval=self.frame_interval,
            clock=self.clock,
        )
        self._replace_session(session)
        self.state = DisplayState.READY
        session.start()
        logger.info(
            f"Showing {len(model.nodes)} constants and {len(model.edges)} dependencies "
            f"for {file_path or 'project'}"
        )

    def _replace_session(self, session: GraphSession | None) -> None:
        if self.session is not None:
            self.session.dispose()
        self.session = session

    async def load_project(self) -> None:
        """Fetch project info and the file tree for the explorer."""
        try:
            self.project, self.file_tree = await asyncio.gather(
                self.client.get_project_info(),
                self.client.get_file_tree(),
            )
        except (AnalysisServiceError, GraphValidationError) as e:
            logger.error(f"Failed to load project info: {e}")
            self.project, self.file_tree = None, None

    def close(self) -> None:
        """Cancel any pending fetch and dispose the current graph."""
        self._generation += 1
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
        self._pending = None
        self._replace_session(None)
        self.state = DisplayState.IDLE
        self.message = None
