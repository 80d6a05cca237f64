#
# Copyright (c) 2026 MongoDB Inc.
# Author: Benjamin Lorenz <benjamin.lorenz@mongodb.com>
#

import asyncio, os, readline
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.markdown import Markdown
from rich import box
from clients.oracle_client import OracleClient, OracleToolError

console = Console()
history_file = os.path.expanduser("~/.uco_oracle_history")

def show_banner():
    banner = """
# 🪙 Archethic UCO Price Oracle

**MCP server + console client for the Archethic network oracle**

## Commands
- `price` - Latest UCO price (USD/EUR)
- `status` - Server health
- `exit` - Quit
"""
    console.print(Panel(Markdown(banner), border_style="green", box=box.DOUBLE))

async def show_status(client):
    table = Table(title="System Status", box=box.ROUNDED)
    table.add_column("Component", style="cyan")
    table.add_column("Status", style="green")

    tools = await client.list_tools()
    table.add_row("MCP Server", client.server_script.name)
    for name in tools:
        table.add_row(f"  ↳ {name}", "✓ Online")

    console.print(table)

async def show_price(client):
    try:
        quote = await client.get_uco_price()
    except OracleToolError as e:
        console.print(f"[red]❌ {e}[/]")
        return

    table = Table(title=f"💱 {quote['asset']} Price", box=box.SIMPLE)
    table.add_column("USD", style="green")
    table.add_column("EUR", style="cyan")
    table.add_column("Timestamp", style="dim")
    table.add_column("Source", style="magenta")
    table.add_row(
        str(quote["price_usd"]),
        str(quote["price_eur"]),
        quote["timestamp"],
        quote["source"],
    )
    console.print(table)

async def interactive_loop():
    try:
        readline.read_history_file(history_file)
    except FileNotFoundError:
        pass

    show_banner()

    async with OracleClient() as client:
        console.print("\n[bold green]✓ Oracle server connected![/]\n")

        PROMPT = "\001\033[1;34m\002You:\001\033[0m\002 "

        while True:
            try:
                user_input = input(PROMPT).strip()

                if not user_input:
                    continue

                if user_input.lower() in ['exit', 'quit']:
                    console.print("\n[yellow]👋 Goodbye![/]")
                    break

                if user_input.lower() == 'status':
                    await show_status(client)
                    continue

                if user_input.lower() == 'price':
                    with console.status("[dim]Querying oracle...[/]"):
                        await show_price(client)
                    continue

                console.print("[yellow]Unknown command. Try 'price', 'status' or 'exit'.[/]")

            except KeyboardInterrupt:
                console.print("\n[dim](Use 'exit' to quit)[/]")
                continue
            except EOFError:
                break

if __name__ == "__main__":
    try:
        asyncio.run(interactive_loop())
    except KeyboardInterrupt:
        console.print("\n[yellow]Session interrupted.[/]")
    finally:
        readline.write_history_file(history_file)
