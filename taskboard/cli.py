"""
Taskboard CLI — run the UI and poke the backend.

Commands:
- taskboard run     — Start the Reflex dev server
- taskboard config  — Print the resolved configuration as JSON
- taskboard check   — Fetch form settings and tasks once, report counts
- taskboard fields  — List configured field descriptors in order
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import Optional

from taskboard.engine.errors import TaskboardConfigError, TaskboardIntegrationError

logger = logging.getLogger("taskboard.cli")


def main(argv: Optional[list] = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="taskboard",
        description="Taskboard — configurable task manager UI",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # taskboard run
    run_parser = subparsers.add_parser("run", help="Start the Reflex dev server")
    run_parser.add_argument("--port", type=int, default=3000, help="Frontend port (default: 3000)")
    run_parser.add_argument("--backend-port", type=int, default=8000, help="Backend port (default: 8000)")
    run_parser.add_argument("--env", choices=["dev", "prod"], default="dev", help="Environment (default: dev)")

    # taskboard config
    config_parser = subparsers.add_parser("config", help="Print resolved configuration")
    config_parser.add_argument("--config", help="Path to taskboard.yaml (default: auto-discover)")

    # taskboard check
    check_parser = subparsers.add_parser("check", help="Check the backend is reachable")
    check_parser.add_argument("--config", help="Path to taskboard.yaml (default: auto-discover)")

    # taskboard fields
    fields_parser = subparsers.add_parser("fields", help="List configured fields")
    fields_parser.add_argument("--config", help="Path to taskboard.yaml (default: auto-discover)")
    fields_parser.add_argument("--json", action="store_true", help="Print as a JSON array")

    args = parser.parse_args(argv)

    if args.command == "run":
        return cmd_run(args)
    elif args.command == "config":
        return cmd_config(args)
    elif args.command == "check":
        return cmd_check(args)
    elif args.command == "fields":
        return cmd_fields(args)
    else:
        parser.print_help()
        return 0


def cmd_run(args: argparse.Namespace) -> int:
    """Start the Reflex dev server."""
    import subprocess

    print("Starting Taskboard (Reflex) server...")
    try:
        cmd = [
            "reflex", "run",
            "--frontend-port", str(args.port),
            "--backend-port", str(args.backend_port),
            "--env", args.env,
        ]
        result = subprocess.run(cmd, check=True)
        return result.returncode
    except FileNotFoundError:
        print("[ERROR] 'reflex' command not found. Install: pip install reflex")
        return 1
    except subprocess.CalledProcessError as e:
        print(f"[ERROR] reflex exited with code {e.returncode}")
        return 1
    except KeyboardInterrupt:
        print("\nServer stopped.")
        return 0


def _load(args: argparse.Namespace):
    from taskboard.engine.config import load_config

    try:
        return load_config(getattr(args, "config", None))
    except TaskboardConfigError as e:
        print(f"[ERROR] {e.message}")
        for err in e.context.get("validation_errors", []):
            loc = ".".join(str(p) for p in err.get("loc", ()))
            print(f"  - {loc}: {err.get('msg')}")
        return None


def cmd_config(args: argparse.Namespace) -> int:
    """Print the resolved configuration as JSON."""
    config = _load(args)
    if config is None:
        return 1
    print(json.dumps(config.model_dump(), indent=2))
    return 0


def cmd_check(args: argparse.Namespace) -> int:
    """Fetch form settings and tasks once; report counts or the failure."""
    config = _load(args)
    if config is None:
        return 1
    return asyncio.run(_check(config))


async def _check(config) -> int:
    from taskboard.client.backend import BackendClient

    client = BackendClient(config.backend)
    errors = 0
    try:
        print(f"Backend: {config.backend.base_url}{config.backend.api_prefix}")
        try:
            fields = await client.get_form_settings()
            print(f"  [OK] GetFormSettings: {len(fields)} field(s)")
        except TaskboardIntegrationError as e:
            print(f"  [ERROR] GetFormSettings: {_describe(e)}")
            errors += 1
        try:
            tasks = await client.get_tasks()
            print(f"  [OK] GetTasks: {len(tasks)} task(s)")
        except TaskboardIntegrationError as e:
            print(f"  [ERROR] GetTasks: {_describe(e)}")
            errors += 1
    finally:
        await client.aclose()

    print(f"\n{'Backend reachable.' if errors == 0 else f'{errors} error(s) found.'}")
    return 1 if errors else 0


def cmd_fields(args: argparse.Namespace) -> int:
    """List configured field descriptors in order."""
    config = _load(args)
    if config is None:
        return 1
    return asyncio.run(_fields(config, as_json=args.json))


async def _fields(config, as_json: bool = False) -> int:
    from taskboard.client.backend import BackendClient

    client = BackendClient(config.backend)
    try:
        fields = await client.get_form_settings()
    except TaskboardIntegrationError as e:
        print(f"[ERROR] {_describe(e)}")
        return 1
    finally:
        await client.aclose()

    if as_json:
        print(json.dumps([f.to_payload() for f in fields], indent=2))
        return 0

    if not fields:
        print("No fields configured.")
        return 0
    for i, f in enumerate(fields, 1):
        marker = "" if f.is_known_type else "  (not rendered)"
        print(f"{i:>3}. {f.label} [{f.name}] {f.type}{marker}")
    return 0


def _describe(error: TaskboardIntegrationError) -> str:
    if error.is_transport_error:
        return f"unreachable ({error.message})"
    return f"HTTP {error.status_code} ({error.message})"


if __name__ == "__main__":
    sys.exit(main())
