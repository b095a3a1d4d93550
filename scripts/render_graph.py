"""Render a constant dependency graph to an SVG file.

This script:
1. Fetches the project graph (or one file's graph) from the analysis backend
2. Runs the force layout until it settles
3. Writes the resulting frame as a standalone SVG

Usage:
    python scripts/render_graph.py -o graph.svg
    python scripts/render_graph.py --file internal/config/limits.go -o limits.svg
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

# Load .env file from project root
project_root = Path(__file__).parent.parent
load_dotenv(project_root / ".env")

# Add src to path
sys.path.insert(0, str(project_root / "src"))

from constgraph.backend import AnalysisClient, AnalysisServiceError
from constgraph.config import settings
from constgraph.layout import ForceSimulation, SimulationConfig, map_graph, render_frame
from constgraph.models import GraphValidationError
from constgraph.view.graph_view import EMPTY_FILE_MESSAGE, EMPTY_PROJECT_MESSAGE

logger = logging.getLogger(__name__)


async def render(file_path: str | None, output: Path, base_url: str, max_ticks: int) -> int:
    """Fetch, lay out and write one graph. Returns a process exit code."""
    client = AnalysisClient(base_url=base_url, timeout=settings.analysis_timeout)
    try:
        graph = await client.get_graph(file_path)
        model = map_graph(graph)
    except (AnalysisServiceError, GraphValidationError) as e:
        logger.error(f"Could not load graph: {e}")
        return 1
    finally:
        await client.close()

    message = None
    if model.is_empty:
        message = EMPTY_FILE_MESSAGE if file_path else EMPTY_PROJECT_MESSAGE
        print(message)

    config = SimulationConfig.from_settings(settings)
    simulation = ForceSimulation(model, config)
    ticks = simulation.run_until_settled(max_ticks)
    state = "settled" if simulation.settled else "not settled"
    print(f"Laid out {len(model.nodes)} constants and {len(model.edges)} dependencies "
          f"in {ticks} ticks ({state})")

    frame = render_frame(
        model, simulation.positions, config.width, config.height, message=message
    )
    output.write_text(frame.to_svg(), encoding="utf-8")
    print(f"Wrote {output}")
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description="Render a constant dependency graph to SVG")
    parser.add_argument(
        "-f", "--file",
        type=str,
        default=None,
        help="Scope the graph to one source file (default: whole project)",
    )
    parser.add_argument(
        "-o", "--output",
        type=Path,
        default=Path("graph.svg"),
        help="Output SVG path (default: graph.svg)",
    )
    parser.add_argument(
        "--base-url",
        type=str,
        default=settings.analysis_base_url,
        help=f"Analysis backend URL (default: {settings.analysis_base_url})",
    )
    parser.add_argument(
        "--max-ticks",
        type=int,
        default=settings.max_settle_ticks,
        help="Upper bound on simulation ticks",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    sys.exit(asyncio.run(render(args.file, args.output, args.base_url, args.max_ticks)))


if __name__ == "__main__":
    main()
