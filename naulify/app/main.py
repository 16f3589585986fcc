"""``naulify`` command-line entry point.

Subcommands:
    qr VEHICLE_ID --out FILE [--size N]
        Write the payment QR code of a vehicle as PNG.
    report VEHICLE_ID [--period PERIOD]
        Sign in with ``NAULIFY_EMAIL``/``NAULIFY_PASSWORD`` and print the fare
        collections of the period with their total.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from typing import Callable, Optional, Sequence

from naulify.domain.payment import payment_url
from naulify.domain.reports import ReportPeriod
from naulify.domain.errors import ValidationError
from naulify.utils import logging as logging_utils
from naulify.utils.formatting import format_currency, format_date
from naulify.utils.qr_code import save_qr_png
from naulify.viewmodels.states import Authenticated, FareCollectionsLoaded
from naulify.viewmodels.status_format import auth_status_label, error_message, route_status_label

from .config import load_config
from .container import AppContainer, build_container

log = logging.getLogger(__name__)

Printer = Callable[[str], None]


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="naulify", description="Naulify operator tools")
    parser.add_argument("--offline", action="store_true", help="use in-memory backends")
    parser.add_argument("--debug", action="store_true", help="enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    qr = sub.add_parser("qr", help="write the payment QR code of a vehicle")
    qr.add_argument("vehicle_id")
    qr.add_argument("--out", required=True, help="PNG file to write")
    qr.add_argument("--size", type=int, default=512, help="image size in pixels")

    report = sub.add_parser("report", help="print fare collections for a period")
    report.add_argument("vehicle_id")
    report.add_argument(
        "--period",
        default="today",
        choices=[period.name.lower() for period in ReportPeriod],
    )
    return parser


def run_qr(vehicle_id: str, out: str, size: int, echo: Printer = print) -> int:
    try:
        path = save_qr_png(payment_url(vehicle_id), out, size)
    except (ValidationError, ValueError) as exc:
        echo(f"error: {exc}")
        return 2
    echo(f"Wrote {path}")
    return 0


async def run_report(
    container: AppContainer,
    vehicle_id: str,
    period: ReportPeriod,
    *,
    email: str = "",
    password: str = "",
    echo: Printer = print,
) -> int:
    await container.start()
    if not container.config.offline and not isinstance(container.auth_vm.auth_state.value, Authenticated):
        await container.auth_vm.sign_in_with_email(email, password)
        auth_state = container.auth_vm.auth_state.value
        if not isinstance(auth_state, Authenticated):
            echo(auth_status_label(auth_state))
            return 1

    log.debug("Loading %s report for %s", period.name, vehicle_id)
    route_vm = container.route_vm
    await route_vm.load_report(vehicle_id, period)
    state = route_vm.route_state.value
    if not isinstance(state, FareCollectionsLoaded):
        echo(f"error: {error_message(state) or route_status_label(state)}")
        return 1

    echo(f"{period.title} - {route_status_label(state)}")
    for item in state.collections:
        echo(f"{format_date(item.timestamp)}  {format_currency(item.amount):>16}  {item.status.value}")
    summary = route_vm.fare_summary.value
    echo(f"Total: {format_currency(summary.total)} (completed {format_currency(summary.completed_total)})")
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    logging_utils.configure_root(logging.DEBUG if args.debug else logging.WARNING)

    if args.command == "qr":
        return run_qr(args.vehicle_id, args.out, args.size)

    try:
        config = load_config()
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    if args.offline:
        config.offline = True
    if config.debug_logging:
        logging_utils.apply_debug_preference(True)

    try:
        container = build_container(config)
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    async def _report() -> int:
        try:
            return await run_report(
                container,
                args.vehicle_id,
                ReportPeriod.parse(args.period),
                email=os.getenv("NAULIFY_EMAIL", ""),
                password=os.getenv("NAULIFY_PASSWORD", ""),
            )
        finally:
            container.close()

    return asyncio.run(_report())


if __name__ == "__main__":
    sys.exit(main())
