"""Client for the constant analysis backend.

The backend exposes four JSON endpoints under one base URL:
- GET  /project-info       -> {projectPath, projectName}
- GET  /file-tree          -> recursive {name, path, isDir, children?}
- GET  /dependency-graph   -> {nodes, edges} for the whole project
- POST /file-dependencies  -> {nodes, edges} scoped to {filePath}

Requests are plain `requests` calls run in a worker thread so the event
loop (and any running layout simulation) never blocks on the network.
Failures are not retried here; the caller decides when to try again.
"""

import asyncio
import logging
from typing import Any

import requests

from constgraph.config import Settings
from constgraph.models import DependencyGraph, FileNode, ProjectInfo

logger = logging.getLogger(__name__)


class AnalysisServiceError(RuntimeError):
    """The backend could not be reached or answered with a non-2xx status."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class AnalysisClient:
    """Async-wrapped client for the analysis backend using requests."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session

    @classmethod
    def from_settings(cls, settings: Settings) -> "AnalysisClient":
        return cls(base_url=settings.analysis_base_url, timeout=settings.analysis_timeout)

    def _get_session(self) -> requests.Session:
        """Get or create the HTTP session."""
        if self._session is None:
            self._session = requests.Session()
            self._session.headers.update({"Accept": "application/json"})
        return self._session

    async def close(self) -> None:
        """Close the HTTP session."""
        if self._session is not None:
            self._session.close()
            self._session = None

    def _sync_request(self, method: str, path: str, payload: dict | None = None) -> Any:
        """Synchronous request (runs in thread)."""
        session = self._get_session()
        url = f"{self.base_url}{path}"

        try:
            response = session.request(method, url, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            raise AnalysisServiceError(f"{method} {path} failed: {e}") from e

        if not response.ok:
            raise AnalysisServiceError(
                f"{method} {path} returned {response.status_code}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise AnalysisServiceError(f"{method} {path} returned invalid JSON") from e

    async def _request(self, method: str, path: str, payload: dict | None = None) -> Any:
        try:
            return await asyncio.to_thread(self._sync_request, method, path, payload)
        except AnalysisServiceError as e:
            logger.error(f"Analysis backend error: {e}")
            raise

    async def get_project_info(self) -> ProjectInfo:
        """Fetch the analysed project's path and name."""
        return ProjectInfo.from_dict(await self._request("GET", "/project-info"))

    async def get_file_tree(self) -> FileNode:
        """Fetch the project's file tree."""
        return FileNode.from_dict(await self._request("GET", "/file-tree"))

    async def get_dependency_graph(self) -> DependencyGraph:
        """Fetch the whole-project dependency graph."""
        data = await self._request("GET", "/dependency-graph")
        graph = DependencyGraph.from_dict(data)
        logger.debug(f"Project graph: {len(graph.nodes)} nodes, {len(graph.edges)} edges")
        return graph

    async def get_file_dependencies(self, file_path: str) -> DependencyGraph:
        """Fetch the dependency graph scoped to one file."""
        data = await self._request("POST", "/file-dependencies", {"filePath": file_path})
        graph = DependencyGraph.from_dict(data)
        logger.debug(
            f"Graph for {file_path}: {len(graph.nodes)} nodes, {len(graph.edges)} edges"
        )
        return graph

    async def get_graph(self, file_path: str | None = None) -> DependencyGraph:
        """Whole-project graph when no file is given, file-scoped otherwise."""
        if file_path is None:
            return await self.get_dependency_graph()
        return await self.get_file_dependencies(file_path)
