#!/usr/bin/env python3
"""
Second Brain command line.

    python run.py --action server --reload -v
    python run.py --action health
    python run.py --action config
    python run.py --action test --test-type unit --coverage
"""

import subprocess
import sys
from collections.abc import Callable
from pathlib import Path

import click
import httpx
from pydantic import ValidationError

PROJECT_ROOT = Path(__file__).parent
sys.path.insert(0, str(PROJECT_ROOT))

from second_brain.backend.core.logging import get_logger, setup_logging  # noqa: E402

logger = get_logger("run")

TEST_PATHS = {"all": "tests/", "unit": "tests/unit", "integration": "tests/integration"}


def validate_project_root() -> Path:
    if not (PROJECT_ROOT / ".project_root").exists():
        click.secho("Error: .project_root not found. Run from project root.", fg="red", err=True)
        sys.exit(1)
    return PROJECT_ROOT


def run_server(host: str | None, port: int | None, reload: bool, **_: object) -> None:
    """Start uvicorn in a child process on the configured (or given) address."""
    from second_brain.backend.core.config import get_app_config

    server = get_app_config().application.server
    host, port = host or server.host, port or server.port
    cmd = [
        sys.executable, "-m", "uvicorn", "second_brain.backend.main:app",
        "--host", host, "--port", str(port),
    ]
    if reload:
        cmd.append("--reload")

    logger.info("Starting server", extra={"host": host, "port": port, "reload": reload})
    click.echo(f"Serving on http://{host}:{port} (Ctrl+C to stop)")
    try:
        subprocess.run(cmd, check=True)
    except KeyboardInterrupt:
        logger.info("Server stopped")
    except subprocess.CalledProcessError as e:
        logger.error("Server exited with an error", extra={"exit_code": e.returncode})
        sys.exit(e.returncode)


def _probe_server() -> tuple[bool, str]:
    from second_brain.backend.core.config import get_server_base_url

    base_url, timeout = get_server_base_url()
    try:
        response = httpx.get(f"{base_url}/health/ready", timeout=timeout)
    except httpx.HTTPError as e:
        logger.debug("Server probe failed", extra={"url": base_url, "error": str(e)})
        return False, f"{base_url}: {e}"
    status = response.json().get("status", "unknown") if response.content else "no body"
    return response.status_code == 200, f"{base_url}: {status}"


def check_health(**_: object) -> None:
    """Validate config and secrets locally, then ask the running server if it is ready."""
    from second_brain.backend.core.config import get_app_config, get_settings

    results: list[tuple[str, bool, str]] = []
    try:
        results.append(("YAML configuration", True, get_app_config().application.name))
    except (FileNotFoundError, ValueError) as e:
        results.append(("YAML configuration", False, str(e)))
    try:
        get_settings()
        results.append(("Secrets", True, ""))
    except ValidationError as e:
        results.append(("Secrets", False, f"{e.error_count()} missing or invalid"))
    results.append(("Server readiness", *_probe_server()))

    click.echo("Health Check Results:")
    for name, passed, detail in results:
        badge = click.style("PASS", fg="green") if passed else click.style("FAIL", fg="red")
        click.echo(f"  {badge}  {name}" + (f" ({detail})" if detail else ""))

    if not all(passed for _, passed, _ in results):
        click.secho("Some checks failed.", fg="yellow")
        sys.exit(1)
    click.secho("All checks passed!", fg="green")


def _echo_tree(values: dict, indent: int = 2) -> None:
    for key, value in values.items():
        if isinstance(value, dict):
            click.echo(f"{' ' * indent}{key}:")
            _echo_tree(value, indent + 2)
        else:
            click.echo(f"{' ' * indent}{key}: {value}")


def show_config(**_: object) -> None:
    """Print every YAML section. Secrets live in the environment and are never shown."""
    from second_brain.backend.core.config import get_app_config

    try:
        config = get_app_config()
    except (FileNotFoundError, ValueError) as e:
        logger.error("Configuration invalid", extra={"error": str(e)})
        click.secho(f"Error loading configuration: {e}", fg="red")
        sys.exit(1)

    for title, section in (
        ("Application", config.application),
        ("Database", config.database),
        ("Logging", config.logging),
        ("Feature Flags", config.features),
        ("Security", config.security),
    ):
        click.echo(f"{title} (from YAML):")
        _echo_tree(section.model_dump())
        click.echo()


def run_tests(test_type: str, coverage: bool, **_: object) -> None:
    """Run pytest over the chosen test tree."""
    cmd = [sys.executable, "-m", "pytest", TEST_PATHS[test_type], "-v"]
    if coverage:
        cmd += ["--cov=second_brain", "--cov-report=term-missing"]

    logger.info("Running tests", extra={"cmd": " ".join(cmd)})
    sys.exit(subprocess.run(cmd).returncode)


def show_info(**_: object) -> None:
    """Show this overview."""
    from second_brain.backend.core.config import get_app_config

    app = get_app_config().application
    click.echo(f"{app.name} {app.version}")
    click.echo(app.description)
    click.echo(f"API prefix: {app.api_prefix}")
    click.echo("\nAvailable Actions:")
    for name, handler in ACTIONS.items():
        summary = (handler.__doc__ or "").strip().splitlines()
        click.echo(f"  {name:<8} {summary[0] if summary else ''}")


ACTIONS: dict[str, Callable[..., None]] = {
    "server": run_server,
    "health": check_health,
    "config": show_config,
    "test": run_tests,
    "info": show_info,
}


@click.command()
@click.option("--action", type=click.Choice(list(ACTIONS)), default="info", help="Action to perform.")
@click.option("--verbose", "-v", is_flag=True, help="INFO level logging.")
@click.option("--debug", "-d", is_flag=True, help="DEBUG level logging.")
@click.option("--host", default=None, help="Bind address (server).")
@click.option("--port", default=None, type=int, help="Port (server).")
@click.option("--reload", is_flag=True, help="Reload on code changes (server).")
@click.option(
    "--test-type",
    type=click.Choice(list(TEST_PATHS)),
    default="all",
    help="Which tests to run (test).",
)
@click.option("--coverage", is_flag=True, help="Collect coverage (test).")
def main(action: str, verbose: bool, debug: bool, **options: object) -> None:
    """
    Second Brain Entry Point.

    Run the API server, probe a running server, view configuration,
    or run tests.
    """
    validate_project_root()
    log_level = "DEBUG" if debug else "INFO" if verbose else "WARNING"
    setup_logging(level=log_level, format_type="console")
    logger.debug("Dispatching", extra={"action": action, "log_level": log_level})
    ACTIONS[action](**options)


if __name__ == "__main__":
    main()
