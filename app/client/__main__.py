"""Console timer face: python -m app.client [--duration SECONDS|MM:SS] [--url URL] [--mute]"""
import argparse
import asyncio
import logging
import sys

from app.client.remote import RemoteTimerBackend
from app.client.timer_client import TimerClient
from app.config import DEFAULT_DURATION_SECONDS, LOG_LEVEL, TIMER_API_URL
from app.models.timer_session import TimerState
from app.utils.time_format import parse_time

PROGRESS_WIDTH = 20


def duration_arg(value: str) -> int:
    """argparse type: whole seconds ("240") or minutes and seconds ("04:00")"""
    try:
        seconds = parse_time(value) if ":" in value else int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected seconds or MM:SS, got {value!r}")
    if seconds <= 0:
        raise argparse.ArgumentTypeError(f"duration must be positive, got {value!r}")
    return seconds


def progress_bar(state: TimerState, width: int = PROGRESS_WIDTH) -> str:
    """Elapsed share of the countdown, e.g. "[#####...............]" """
    elapsed = state.duration_seconds - state.remaining_seconds
    filled = elapsed * width // state.duration_seconds if state.duration_seconds > 0 else width
    return "[" + "#" * filled + "." * (width - filled) + "]"


def render(state: TimerState, warning: str | None = None) -> str:
    """One-line timer face, e.g. "[running] 03:59 [#...................]" """
    if state.is_completed:
        status = "done"
    elif state.is_running:
        status = "running"
    else:
        status = "paused"

    line = f"[{status:>7}] {state.formatted_time} {progress_bar(state)}"
    if warning:
        line += f"  ({warning})"
    return line


def _print_face(client: TimerClient, state: TimerState) -> None:
    sys.stdout.write("\r" + render(state, client.warning).ljust(96))
    sys.stdout.flush()


async def main(duration_seconds: int, base_url: str, sound: bool = True) -> None:
    client = TimerClient(RemoteTimerBackend(base_url), duration_seconds=duration_seconds)

    if sound:
        @client.on_complete
        def _alarm(state: TimerState) -> None:
            sys.stdout.write("\a")

    await client.create()
    state = await client.start()
    _print_face(client, state)

    await client.run(on_tick=lambda s: _print_face(client, s))
    sys.stdout.write("\n")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Run a countdown against the timer API")
    parser.add_argument(
        "--duration",
        type=duration_arg,
        default=DEFAULT_DURATION_SECONDS,
        help="countdown length in seconds or MM:SS",
    )
    parser.add_argument("--url", default=TIMER_API_URL, help="timer API base URL")
    parser.add_argument("--mute", action="store_true", help="do not ring the terminal bell on completion")
    return parser


def cli() -> None:
    args = build_parser().parse_args()

    logging.basicConfig(
        level=LOG_LEVEL,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )
    try:
        asyncio.run(main(args.duration, args.url, sound=not args.mute))
    except KeyboardInterrupt:
        sys.stdout.write("\n")


if __name__ == "__main__":
    cli()
