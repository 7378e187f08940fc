"""Entry point for the album service and its health port."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

import uvicorn
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from src.api.health_server import create_health_app
from src.api.server import create_app
from src.config import Settings, settings
from src.health.defaults import build_default_registry
from src.health.evaluator import AggregateFailure, EvaluationResult, HealthEvaluator
from src.health.probes import ProbeKind

console = Console()
logger = logging.getLogger(__name__)

KINDS = {"live": ProbeKind.LIVENESS, "ready": ProbeKind.READINESS}


def build_evaluator(cfg: Settings) -> HealthEvaluator:
    registry = build_default_registry(cfg)
    return HealthEvaluator(registry, parallel=cfg.health_parallel_probes)


def build_servers(cfg: Settings) -> tuple[uvicorn.Server, uvicorn.Server]:
    """Create the health server and the application server, in that order."""
    health_server = uvicorn.Server(uvicorn.Config(
        create_health_app(build_evaluator(cfg)),
        host=cfg.health_host,
        port=cfg.health_port,
        log_level=cfg.log_level.lower(),
        access_log=False,
    ))
    api_server = uvicorn.Server(uvicorn.Config(
        create_app(),
        host=cfg.api_host,
        port=cfg.api_port,
        log_level=cfg.log_level.lower(),
    ))
    return health_server, api_server


async def _serve_guarded(server: uvicorn.Server, name: str) -> None:
    """Serve until exit. A crash is logged and leaves the other listener up."""
    try:
        await server.serve()
    except SystemExit as e:
        # uvicorn exits this way when it cannot bind
        logger.error("%s server stopped during startup (exit code %s)", name, e.code)
    except Exception:
        logger.exception("%s server crashed", name)


async def serve_both(health_server: uvicorn.Server, api_server: uvicorn.Server) -> None:
    """Run both listeners side by side; each outlives a failure of the other."""
    await asyncio.gather(
        _serve_guarded(health_server, "health"),
        _serve_guarded(api_server, "api"),
    )


async def _serve_all(cfg: Settings) -> None:
    await serve_both(*build_servers(cfg))


def run_server(cfg: Settings = settings) -> None:
    """Start both listeners."""
    console.print(
        Panel.fit(
            f"[bold]Album Service[/bold]\n"
            f"API:    {cfg.api_host}:{cfg.api_port}\n"
            f"Health: {cfg.health_host}:{cfg.health_port}",
            title="album-service",
            border_style="green",
        )
    )
    asyncio.run(_serve_all(cfg))


def render_result(result: EvaluationResult) -> Table:
    table = Table(title=f"{result.kind.value} ({result.duration_ms}ms)")
    table.add_column("Probe")
    table.add_column("Status")
    table.add_column("Message")
    for name, error in result.results.items():
        if error is None:
            table.add_row(name, "[green]OK[/green]", "")
        else:
            table.add_row(name, "[red]FAIL[/red]", error)
    return table


def run_check(kind_arg: str, cfg: Settings = settings) -> int:
    """Evaluate one probe kind once. Returns the process exit code."""
    result = build_evaluator(cfg).evaluate(KINDS[kind_arg])
    console.print(render_result(result))
    try:
        result.raise_for_status()
    except AggregateFailure as e:
        console.print(f"[bold red]{e}[/bold red]")
        return 1
    console.print("[bold green]healthy[/bold green]")
    return 0


def main(argv: list[str] | None = None) -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper()),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
    )

    parser = argparse.ArgumentParser(description="Album service with a sidecar health port")
    sub = parser.add_subparsers(dest="command")

    # Server mode
    sub.add_parser("serve", help="Start the API and health servers")

    # One-shot probe evaluation
    check_parser = sub.add_parser("check", help="Evaluate health probes once")
    check_parser.add_argument("kind", choices=sorted(KINDS), help="Probe kind to evaluate")

    args = parser.parse_args(argv)

    if args.command == "serve":
        run_server()
    elif args.command == "check":
        sys.exit(run_check(args.kind))
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
