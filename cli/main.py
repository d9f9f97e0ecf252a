"""CLI entry point and argument parsing"""

import argparse
import asyncio
import json
import sys
from pathlib import Path

from rich.console import Console
from rich.table import Table

from config import GatewayConfig
from errors import MissingFieldsError
from oauth import TokenLifecycleManager, normalize_credentials
from proxy.app import build_store


console = Console()


def _build_manager() -> TokenLifecycleManager:
    config = GatewayConfig.from_settings()
    return TokenLifecycleManager(build_store(config), config)


async def show_status(manager: TokenLifecycleManager) -> None:
    """Print the credential status table"""
    status = await manager.status()

    table = Table(title="Amazon Q Credential Status")
    table.add_column("Property", style="cyan")
    table.add_column("Value")

    table.add_row("Has Credentials", "Yes" if status["has_credentials"] else "No")
    table.add_row("Has Access Token", "Yes" if status["has_access_token"] else "No")
    table.add_row("Token Expiry", status["token_expiry"] or "-")
    table.add_row("Credential Store", manager.store.describe())

    console.print(table)


async def set_credentials_from_file(manager: TokenLifecycleManager, path: str) -> bool:
    """Validate and store a JSON credentials file

    Returns:
        True when the credentials were stored
    """
    try:
        record = json.loads(Path(path).expanduser().read_text())
    except (OSError, json.JSONDecodeError) as e:
        console.print(f"[red]ERROR:[/red] Could not read credentials from {path}: {e}")
        return False

    if not isinstance(record, dict):
        console.print("[red]ERROR:[/red] Credentials file must contain a JSON object")
        return False

    normalized, missing = normalize_credentials(record)
    if missing:
        console.print(f"[red]ERROR:[/red] {MissingFieldsError(missing).message}")
        return False

    await manager.set_credentials(normalized)
    console.print(f"[green]✓ Credentials saved to {manager.store.describe()}[/green]")
    return True


def main():
    """Entry point for the CLI"""
    parser = argparse.ArgumentParser(description="Amazon Q to OpenAI/Anthropic API gateway")
    parser.add_argument("--debug", "-d", action="store_true", help="Enable debug logging")
    parser.add_argument("--bind", "-b", default=None, help="Override bind address (default: from config)")
    parser.add_argument("--port", "-p", type=int, default=None, help="Override port (default: from config)")
    parser.add_argument("--status", action="store_true", help="Show credential status and exit")
    parser.add_argument(
        "--set-credentials",
        metavar="PATH",
        default=None,
        help="Store refresh_token/client_id/client_secret from a JSON file and exit"
    )

    args = parser.parse_args()

    try:
        if args.set_credentials:
            ok = asyncio.run(set_credentials_from_file(_build_manager(), args.set_credentials))
            sys.exit(0 if ok else 1)

        if args.status:
            asyncio.run(show_status(_build_manager()))
            sys.exit(0)

        from proxy import ProxyServer

        ProxyServer(debug=args.debug, bind_address=args.bind, port=args.port).run()

    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        console.print("Goodbye!")
    except Exception as e:
        console.print(f"\n[red]Fatal error:[/red] {e}")
        if args.debug:
            import traceback
            traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
