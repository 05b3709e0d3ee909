"""
Checksum command: fingerprint a world dump.
"""

import json
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from desync.core.errors import DesyncError
from desync.core.ordering import sort_entities_ids
from desync.dump import load_id_map, load_world

console = Console()


def checksum_command(
    world_path: str = typer.Argument(..., help="Path to world dump (JSON)"),
    id_map: Optional[str] = typer.Option(
        None,
        "--map",
        "-m",
        help="Canonical id map (JSON); switches to external-map ordering",
    ),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Compute the desync fingerprint of a world dump.

    Examples:
        desync checksum world.json
        desync checksum world.json --map ids.json
        desync checksum world.json --json
    """
    try:
        dump = load_world(world_path)
        if id_map is not None:
            policy = load_id_map(id_map)
            policy_name = "external-map"
        else:
            policy = sort_entities_ids
            policy_name = "id-sort"

        crc = dump.tracker(policy).calculate_crc(dump.world)
        tracked = len(dump.world.tracked())

        if json_output:
            output = {
                "success": True,
                "crc": crc.value,
                "crc_hex": crc.hex(),
                "ordering": policy_name,
                "entities": len(dump.world),
                "tracked_entities": tracked,
                "component_types": list(dump.component_types),
            }
            print(json.dumps(output, indent=2))
        else:
            table = Table(title="Desync Fingerprint")
            table.add_column("Field", style="green")
            table.add_column("Value", style="cyan")
            table.add_row("CRC-32", f"[yellow]{crc.hex()}[/yellow]")
            table.add_row("Ordering", policy_name)
            table.add_row("Entities", str(len(dump.world)))
            table.add_row("Tracked", str(tracked))
            table.add_row("Components", ", ".join(dump.component_types) or "-")
            console.print(table)

        raise typer.Exit(0)

    except FileNotFoundError as e:
        if json_output:
            print(json.dumps({"error": "File not found", "path": e.filename}))
        else:
            console.print(f"[red]Error: File not found:[/red] {e.filename}")
        raise typer.Exit(2)
    except (DesyncError, json.JSONDecodeError) as e:
        if json_output:
            print(json.dumps({"error": str(e)}))
        else:
            console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(2)
