"""
svcctl - query and control services through whichever init system runs the host.
"""
import argparse
import dataclasses
import json
import logging
import sys
from typing import List, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from svc_core.manager import get_init_manager
from svc_core.models.service_info import ServiceInfo

console = Console()

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="svcctl",
        description="""
            SVCCTL:
            Lists, inspects, starts, stops, enables and disables services
            with the same commands on systemd and OpenRC hosts.
        """
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log every call made to the init system."
    )
    sub = parser.add_subparsers(dest="command", required=True)

    list_cmd = sub.add_parser("list", help="List services and whether they run.")
    list_cmd.add_argument(
        "pattern",
        nargs="?",
        default="",
        help="Shell glob matched against service names, e.g. 'ssh*'."
    )
    list_cmd.add_argument(
        "--save-file",
        type=str,
        default="",
        help="Also write the listing to this file as JSON."
    )

    for name, text in [
        ("status", "Show whether a service is running and enabled."),
        ("enable", "Enable a service at boot and make sure it runs."),
        ("disable", "Disable a service, stopping it first if it runs."),
        ("start", "Start a service."),
        ("stop", "Stop a service."),
    ]:
        cmd = sub.add_parser(name, help=text)
        cmd.add_argument("name", help="Service name, with or without '.service'.")

    sub.add_parser("reload", help="Reload the init system configuration.")
    return parser

def print_services(services: List[ServiceInfo]):
    table = Table(title="Services")
    table.add_column("Name", style="cyan")
    table.add_column("Running")
    for svc in services:
        table.add_row(escape(svc.name), "[green]yes[/green]" if svc.running else "[red]no[/red]")
    console.print(table)

def save_services(path: str, services: List[ServiceInfo]):
    with open(path, "w") as f:
        json.dump([dataclasses.asdict(s) for s in services], f, indent=4)
    console.print(f"Output saved to {path} (JSON)")

def run(args: argparse.Namespace):
    manager = get_init_manager()

    if args.command == "list":
        services = manager.list_services(args.pattern)
        print_services(services)
        if args.save_file:
            save_services(args.save_file, services)
    elif args.command == "status":
        running = manager.is_service_running(args.name)
        enabled = manager.is_service_enabled(args.name)
        console.print(f"{escape(args.name)}: running={running} enabled={enabled} ({manager.name})")
    elif args.command == "enable":
        manager.enable_service(args.name)
        console.print(f"Enabled {escape(args.name)}")
    elif args.command == "disable":
        manager.disable_service(args.name)
        console.print(f"Disabled {escape(args.name)}")
    elif args.command == "start":
        manager.start_service(args.name)
        console.print(f"Started {escape(args.name)}")
    elif args.command == "stop":
        manager.stop_service(args.name)
        console.print(f"Stopped {escape(args.name)}")
    elif args.command == "reload":
        manager.reload()
        console.print(f"Reloaded {manager.name}")

def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True))],
    )

    try:
        run(args)
    except Exception as e:
        # init system errors, failed rc commands and D-Bus errors alike
        logging.getLogger(__name__).debug("command failed", exc_info=True)
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        return 1
    return 0

if __name__ == "__main__":
    sys.exit(main())
