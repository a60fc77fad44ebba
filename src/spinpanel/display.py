"""
Display manager for the Rich-based workout dashboard.

Handles all console output: banner, messages, the live telemetry table and
the end-of-ride summary. A failure while rendering drops that frame and never
reaches the telemetry pipeline.
"""

import logging
from typing import Any, Optional

from rich.console import Console
from rich.live import Live
from rich.panel import Panel
from rich.table import Table

from .workout import WorkoutSnapshot

logger = logging.getLogger(__name__)

_EMPTY_SNAPSHOT = WorkoutSnapshot(
    speed_kmh=0.0,
    power_w=0.0,
    rpm=0.0,
    elapsed_time_seconds=0,
    total_distance_m=0.0,
)


class DisplayManager:
    """Manages console output with Rich library."""

    def __init__(
        self,
        console: Optional[Console] = None,
        error_console: Optional[Console] = None,
    ):
        """Initialize display manager.

        Args:
            console: Rich Console instance (creates one if None)
            error_console: Console for error messages (stderr if None)
        """
        self.console = console or Console()
        self.error_console = error_console or Console(stderr=True)
        self.live_enabled = False
        self._live: Optional[Live] = None
        self.frames_rendered = 0
        self.frames_dropped = 0

    def _print(self, *objects: Any, **kwargs: Any) -> bool:
        """Print to the console, logging instead of raising on failure."""
        try:
            self.console.print(*objects, **kwargs)
        except Exception as e:
            logger.error(f"Console output error: {e}")
            return False
        return True

    def print_banner(self) -> None:
        """Print startup banner."""
        panel = Panel(
            "[bold cyan]SpinPanel - Gallant Spin Bike Dashboard[/bold cyan]\n"
            "[dim]Pedal to wake the bike up, Ctrl+C to end the workout[/dim]",
            expand=False,
        )
        self._print(panel)

    def print_error(self, message: str) -> None:
        """Print red error message to the error console.

        Args:
            message: Error message text
        """
        try:
            self.error_console.print(f"[red]Error:[/red] {message}", highlight=False)
        except Exception as e:
            logger.error(f"Console output error: {e}")

    def print_info(self, message: str) -> None:
        """Print blue info message.

        Args:
            message: Info message text
        """
        self._print(f"[cyan]Info:[/cyan] {message}", highlight=False)

    def print_summary(self, snapshot: WorkoutSnapshot) -> None:
        """Print final workout totals.

        Args:
            snapshot: State at the end of the ride
        """
        table = self.format_workout_table(snapshot)
        table.title = "Workout Summary"
        self._print(table)

    def start_live(self) -> None:
        """Start live display refresh mode.

        If the live display cannot start, frames are printed one by one.
        """
        if self.live_enabled:
            return

        renderable = self.format_workout_table(_EMPTY_SNAPSHOT)
        try:
            self._live = Live(renderable, console=self.console, refresh_per_second=4)
            self._live.start()
        except Exception as e:
            logger.error(f"Live display error: {e}")
            self._live = None
            return
        self.live_enabled = True

    def stop_live(self) -> None:
        """Stop live display refresh mode."""
        if not self.live_enabled:
            return

        self.live_enabled = False
        live, self._live = self._live, None
        if live is not None:
            try:
                live.stop()
            except Exception as e:
                logger.error(f"Live display error: {e}")

    def render(self, snapshot: WorkoutSnapshot) -> bool:
        """Show a new workout snapshot.

        Args:
            snapshot: Immutable copy of the workout state

        Returns:
            True if the frame was drawn, False if it was dropped
        """
        try:
            renderable = self.format_workout_table(snapshot)
            if self._live is not None:
                self._live.update(renderable)
            else:
                self.console.print(renderable)
        except Exception as e:
            self.frames_dropped += 1
            logger.error(f"Live update error: {e}")
            return False

        self.frames_rendered += 1
        return True

    def format_workout_table(self, snapshot: WorkoutSnapshot) -> Table:
        """Create Rich Table for the workout values.

        Args:
            snapshot: Workout values to show

        Returns:
            Rich Table object
        """
        table = Table(show_header=True, header_style="bold cyan")
        table.add_column("Metric", style="cyan")
        table.add_column("Value", style="yellow")

        table.add_row("Speed", self.format_speed(snapshot.speed_kmh))
        table.add_row("Cadence", self.format_cadence(snapshot.rpm))
        table.add_row("Power", self.format_power(snapshot.power_w))
        table.add_row("Distance", self.format_distance(snapshot.total_distance_m))
        table.add_row("Bike time", self.format_time(snapshot.elapsed_time_seconds))

        return table

    @staticmethod
    def format_time(seconds: int) -> str:
        """Convert seconds to MM:SS format.

        Args:
            seconds: Number of seconds

        Returns:
            Formatted time string
        """
        if not isinstance(seconds, int):
            seconds = int(seconds)  # type: ignore[unreachable]
        mins = seconds // 60
        secs = seconds % 60
        return f"{mins}:{secs:02d}"

    @staticmethod
    def format_speed(km_h: float) -> str:
        return f"{km_h:.1f} km/h"

    @staticmethod
    def format_cadence(rpm: float) -> str:
        return f"{rpm:.0f} RPM"

    @staticmethod
    def format_power(watts: float) -> str:
        return f"{watts:.0f} W"

    @staticmethod
    def format_distance(meters: float) -> str:
        """Format distance value intelligently.

        Args:
            meters: Distance in meters

        Returns:
            Formatted distance (km if >1000m, otherwise m)
        """
        if meters >= 1000:
            km = meters / 1000
            return f"{km:.2f} km"
        return f"{meters:.2f} m"
