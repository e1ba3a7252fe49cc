"""CLI entry point for backend-api-proxy."""

import sys
from datetime import datetime

from rich.console import Console

from app import create_app
from core.config import BASE_URL_ENV, CONFIG_FILE, load_config
from core.exceptions import ConfigurationError
from ui.dashboard import Dashboard
from ui.log_utils import clear_logs, write_cli_log

console = Console()


def main():
    """Main CLI entry point."""
    config = load_config()

    # Handle CLI arguments
    if len(sys.argv) > 1:
        arg = sys.argv[1]

        if arg == "--config":
            console.print(f"[bold]Config:[/bold] {CONFIG_FILE}")
            return

        if arg in ("--help", "-h"):
            _print_help()
            return

    try:
        backend_url = config.require_backend()
    except ConfigurationError as e:
        console.print(f"[red][ERROR][/red] {e}")
        console.print(f"[dim]Edit {CONFIG_FILE} and set backend.base_url[/dim]")
        sys.exit(1)

    # Clear previous logs and start dashboard
    clear_logs()
    dashboard = Dashboard(config)

    import uvicorn

    app = create_app(config, dashboard)

    uvicorn_config = uvicorn.Config(
        app,
        host=config.proxy.host,
        port=config.proxy.port,
        log_level="warning",
    )
    server = uvicorn.Server(uvicorn_config)

    dashboard.start()
    start_time = datetime.now()
    write_cli_log("STARTUP", "Proxy started", port=config.proxy.port, backend=backend_url)
    try:
        server.run()
    finally:
        duration = datetime.now() - start_time
        write_cli_log("SHUTDOWN", "Proxy stopped", duration=str(duration))
        dashboard.stop()


def _print_help():
    """Print help message."""
    help_text = f"""
[bold cyan]Backend API Proxy[/bold cyan]

Forwards every request under the mount prefix (default /api) to the backend.

[bold]Usage:[/bold]
    backend-api-proxy              Start with live dashboard
    backend-api-proxy --config     Show config location
    backend-api-proxy --help       Show this help

[bold]Configuration:[/bold]
    Set backend.base_url in {CONFIG_FILE}
    or export {BASE_URL_ENV}.
"""
    console.print(help_text)


if __name__ == "__main__":
    main()
