"""
Command line entry point for the spin bike dashboard.

Runs the whole pipeline: scan for the bike, open the telemetry session, then
decode, aggregate and render every notification until the bike goes away or
the user hits Ctrl+C.
"""

import argparse
import asyncio
import logging
import sys
import time
from typing import Callable, Optional

from .core import DEVICE_NAME_FILTERS, SCAN_ATTEMPTS, SCAN_INTERVAL
from .decoder import DEFAULT_CALIBRATION, Calibration, decode
from .display import DisplayManager
from .errors import SetupError
from .locator import DeviceLocator
from .session import TelemetrySession
from .workout import WorkoutState

logger = logging.getLogger(__name__)


async def ride(
    locator: DeviceLocator,
    display: DisplayManager,
    calibration: Calibration = DEFAULT_CALIBRATION,
    session_factory: Callable[..., TelemetrySession] = TelemetrySession,
    clock: Callable[[], float] = time.monotonic,
) -> WorkoutState:
    """Locate the bike and stream its telemetry to the display.

    Args:
        locator: Configured DeviceLocator
        display: Where snapshots are rendered
        calibration: Scale factors for the decoder
        session_factory: Builds the TelemetrySession for the found device
        clock: Time source for distance integration

    Returns:
        Final workout state once the stream ends

    Raises:
        SetupError: Any failure before streaming starts
    """
    device = await locator.locate()
    display.print_info(f"Bike found: {device.name}")

    session = session_factory(device)
    stream = await session.run()

    state = WorkoutState(now=clock())
    display.start_live()
    try:
        async for payload in stream:
            reading = decode(payload, calibration)
            if state.apply(reading, now=clock()):
                display.render(state.snapshot())
    finally:
        try:
            await session.close()
        finally:
            logger.info(f"Ride ended, {state.total_distance_m:.0f} m covered")
            display.stop_live()
            display.print_summary(state.snapshot())

    return state


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
    )


def main(argv: Optional[list] = None) -> None:
    """Entry point for the dashboard."""
    parser = argparse.ArgumentParser(
        description="Live dashboard for Gallant BLE spin bikes",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  spinpanel                     # Scan for GLT/Gallant bikes and start the dashboard
  spinpanel --name GLT-1234     # Only accept a specific bike
  spinpanel --attempts 30 -v    # Scan longer, with debug logging
        """,
    )

    parser.add_argument(
        "--name",
        action="append",
        dest="names",
        metavar="FRAGMENT",
        help="Advertised name fragment to match (repeatable, default: GLT, Gallant)",
    )

    parser.add_argument(
        "--attempts",
        type=int,
        default=SCAN_ATTEMPTS,
        help=f"Scan passes before giving up (default: {SCAN_ATTEMPTS})",
    )

    parser.add_argument(
        "--interval",
        type=float,
        default=SCAN_INTERVAL,
        help=f"Seconds between scan passes (default: {SCAN_INTERVAL})",
    )

    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )

    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    locator = DeviceLocator(
        name_filters=args.names or DEVICE_NAME_FILTERS,
        attempts=args.attempts,
        interval=args.interval,
    )
    display = DisplayManager()
    display.print_banner()

    try:
        asyncio.run(ride(locator, display))
    except KeyboardInterrupt:
        print("\nWorkout ended")
        sys.exit(0)
    except SetupError as e:
        logger.debug("Setup failed", exc_info=True)
        display.print_error(str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
