"""Real-time CLI dashboard for proxy monitoring."""

from datetime import datetime
from threading import Lock

from rich.console import Console
from rich.layout import Layout
from rich.live import Live
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.config import Config
from ui.log_utils import write_cli_log, write_forward_log

console = Console()


class ForwardInfo:
    """Info about a single forwarded request."""

    def __init__(self, method: str, target_url: str, timestamp: datetime):
        self.method = method
        self.target_url = target_url
        self.status: int | None = None
        self.timestamp = timestamp


class Dashboard:
    """Real-time dashboard showing recent forwards and errors."""

    def __init__(self, config: Config):
        self.config = config
        self._lock = Lock()
        self._recent: list[ForwardInfo] = []
        self._max_recent = 10
        self._status_count = {"2xx": 0, "3xx": 0, "4xx": 0, "5xx": 0}
        self._forward_count = 0
        self._errors: list[str] = []
        self._live: Live | None = None

    def start(self) -> "Dashboard":
        """Start the live dashboard."""
        self._live = Live(
            self._build_layout(),
            console=console,
            refresh_per_second=4,
            screen=False,
        )
        self._live.start()
        return self

    def stop(self) -> None:
        """Stop the live dashboard."""
        if self._live:
            self._live.stop()

    def log_forward(self, method: str, target_url: str, headers: dict[str, str]) -> None:
        """Log a request about to be sent to the backend."""
        with self._lock:
            self._forward_count += 1
            self._recent.insert(0, ForwardInfo(method, target_url, datetime.now()))
            self._recent = self._recent[: self._max_recent]
            self._refresh()

            if self.config.proxy.debug:
                write_forward_log(method, target_url, headers)
            write_cli_log("FORWARD", f"{method} {target_url}")

    def log_response(self, method: str, target_url: str, status: int) -> None:
        """Log the backend status for a forwarded request."""
        with self._lock:
            bucket = f"{status // 100}xx"
            if bucket in self._status_count:
                self._status_count[bucket] += 1
            info = self._find_pending(method, target_url)
            if info:
                info.status = status
            self._refresh()
            write_cli_log("RESPONSE", f"{method} {target_url}", status=status)

    def log_error(self, method: str, target_url: str, message: str) -> None:
        """Log a failed forward."""
        with self._lock:
            self._status_count["5xx"] += 1
            truncated = message[:50] + "..." if len(message) > 50 else message
            self._errors.insert(0, f"{method} {target_url}: {truncated}")
            self._errors = self._errors[:3]
            info = self._find_pending(method, target_url)
            if info:
                info.status = 500
            self._refresh()
            write_cli_log("ERROR", message[:200], method=method, url=target_url)

    def _find_pending(self, method: str, target_url: str) -> ForwardInfo | None:
        return next(
            (
                info
                for info in self._recent
                if info.status is None and info.method == method and info.target_url == target_url
            ),
            None,
        )

    def _refresh(self) -> None:
        """Refresh the display."""
        if self._live:
            self._live.update(self._build_layout())

    def _build_layout(self) -> Layout:
        """Build the dashboard layout."""
        layout = Layout()

        layout.split_column(
            Layout(name="header", size=3),
            Layout(name="body"),
            Layout(name="footer", size=5),
        )

        layout["header"].update(self._build_header())
        layout["body"].update(self._build_requests_panel())
        layout["footer"].update(self._build_footer())

        return layout

    def _build_header(self) -> Panel:
        """Build header with stats."""
        stats = Text()
        stats.append("Backend API Proxy", style="bold cyan")
        stats.append("  |  ")
        stats.append(f"Forwarded: {self._forward_count}", style="blue")
        for bucket, style in (("2xx", "green"), ("4xx", "yellow"), ("5xx", "red")):
            stats.append("  |  ")
            stats.append(f"{bucket}: {self._status_count[bucket]}", style=style)
        stats.append("  |  ")
        stats.append(f"Port: {self.config.proxy.port}", style="dim")

        return Panel(stats, style="cyan")

    def _build_requests_panel(self) -> Panel:
        """Build recent requests panel."""
        if self._recent:
            table = Table(show_header=True, header_style="bold", expand=True, box=None)
            table.add_column("Time", style="dim", width=8)
            table.add_column("Method", width=7)
            table.add_column("Target", ratio=3)
            table.add_column("Status", width=6)

            for info in self._recent:
                table.add_row(
                    info.timestamp.strftime("%H:%M:%S"),
                    info.method,
                    info.target_url[:80] + "..." if len(info.target_url) > 80 else info.target_url,
                    _status_text(info.status),
                )

            content = table
        else:
            content = Text("Waiting for requests...", style="dim")

        return Panel(content, title="[blue]Recent Requests[/blue]", border_style="blue")

    def _build_footer(self) -> Panel:
        """Build footer with errors and help."""
        if self._errors:
            error_text = Text()
            for err in self._errors:
                error_text.append("! ", style="red bold")
                error_text.append(err + "\n", style="red")
            content = error_text
        else:
            content = Text(
                f"{self.config.proxy.mount_prefix}/* -> {self.config.backend.base_url}",
                style="dim",
            )

        return Panel(content, title="[dim]Status[/dim]", border_style="dim")


def _status_text(status: int | None) -> Text:
    if status is None:
        return Text("...", style="dim")
    if status >= 500:
        return Text(str(status), style="red")
    if status >= 400:
        return Text(str(status), style="yellow")
    return Text(str(status), style="green")
