"""Output formatting for CLI commands."""

import json
from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from entityresolver.core.types import EntityDescriptor, EntityDocument
from entityresolver.diagnostics import ResolutionWarning
from entityresolver.exceptions import EntityResolverError

console = Console()


class OutputFormatter:
    """Formats output for terminal or JSON mode."""

    def __init__(self, json_mode: bool = False) -> None:
        """Initialize formatter.

        Args:
            json_mode: If True, output JSON instead of Rich formatting
        """
        self.json_mode = json_mode

    def print_json(self, data: Any) -> None:
        print(json.dumps(data, default=str, indent=2))

    def print_document(self, document: EntityDocument) -> None:
        """Print the fields and relationships of a document."""
        console.print(f"\n[bold]Entity:[/bold] {document.name}")
        console.print(f"Table: {document.entity_table_name}")
        console.print(f"Database: {document.database_type}")
        console.print(
            f"DTO: {document.dto}  Service: {document.service}  Pagination: {document.pagination}"
        )

        if document.fields:
            console.print(f"\n[bold]Fields ({len(document.fields)}):[/bold]")
            fields_table = Table(show_header=True, header_style="bold cyan")
            fields_table.add_column("Name")
            fields_table.add_column("Type")
            fields_table.add_column("Column")
            fields_table.add_column("Rules")

            for f in document.fields:
                fields_table.add_row(
                    f.field_name,
                    f.field_type,
                    f.field_name_as_database_column or "",
                    ", ".join(f.field_validate_rules or []),
                )
            console.print(fields_table)

        if document.relationships:
            console.print(f"\n[bold]Relationships ({len(document.relationships)}):[/bold]")
            rel_table = Table(show_header=True, header_style="bold cyan")
            rel_table.add_column("Name")
            rel_table.add_column("To Entity")
            rel_table.add_column("Type")
            rel_table.add_column("Reciprocal")

            for rel in document.relationships:
                rel_table.add_row(
                    rel.relationship_name or "",
                    rel.other_entity_name,
                    rel.relationship_type,
                    rel.other_entity_relationship_name or "",
                )
            console.print(rel_table)

    def print_descriptor(
        self, descriptor: EntityDescriptor, warnings: list[ResolutionWarning]
    ) -> None:
        """Print a resolved descriptor and the warnings raised while resolving it."""
        if self.json_mode:
            self.print_json(
                {
                    "descriptor": descriptor.to_dict(),
                    "warnings": [w.to_dict() for w in warnings],
                }
            )
            return

        self.print_document(descriptor)
        naming = Table(show_header=False, box=None)
        naming.add_column(style="dim")
        naming.add_column()
        naming.add_row("Class", descriptor.entity_class)
        naming.add_row("Instance", descriptor.entity_instance)
        naming.add_row("API URL", descriptor.entity_api_url)
        naming.add_row("Folder", descriptor.entity_folder_name)
        naming.add_row("Translation key", descriptor.entity_translation_key)
        naming.add_row("Primary key", descriptor.primary_key_type)
        console.print("\n[bold]Naming:[/bold]")
        console.print(naming)
        self.print_warnings(warnings)

    def print_validation(self, document: EntityDocument, warnings: list[ResolutionWarning]) -> None:
        if self.json_mode:
            self.print_json(
                {
                    "valid": True,
                    "document": document.to_dict(),
                    "warnings": [w.to_dict() for w in warnings],
                }
            )
            return
        console.print(f"✓ {document.name} is valid", style="green")
        self.print_warnings(warnings)

    def print_warnings(self, warnings: list[ResolutionWarning]) -> None:
        if not warnings:
            return
        console.print(f"\n[bold yellow]Warnings ({len(warnings)}):[/bold yellow]")
        for warning in warnings:
            console.print(f"  ⚠ {warning.message}", style="yellow")

    def print_error(self, error: Exception) -> None:
        """Print error message.

        Args:
            error: Exception to display
        """
        if self.json_mode:
            if isinstance(error, EntityResolverError):
                self.print_json(error.to_dict())
            else:
                self.print_json({"error": str(error)})
        else:
            panel = Panel(
                str(error),
                title="[red]Error[/red]",
                border_style="red",
            )
            console.print(panel)
