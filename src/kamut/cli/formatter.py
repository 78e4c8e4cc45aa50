# src/kamut/cli/formatter.py
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from kamut.core.context import SKIPPED, FileReport

# Initialize the Rich console for high-quality terminal output
console = Console()


class KamutFormatter:
    """
    KamutFormatter: the visual side of the CLI.
    Renders per-file progress lines, the execution table and the summary panel.
    """

    def __init__(self, output: Console = console):
        self.console = output

    def show_file_report(self, report: FileReport):
        """One line per processed document, then where the output went."""
        self.console.print(f"\n[bold cyan]Processing file:[/bold cyan] {report.file_path}")

        for doc in report.documents:
            label = f"Document {doc.index}"
            if doc.name:
                label += f" ({doc.name})"
            if doc.status == SKIPPED:
                self.console.print(f"  [bold yellow]Warning:[/bold yellow] {label}: {doc.message}")
            else:
                kinds = ", ".join(doc.manifest_kinds)
                self.console.print(f"  [green]✔[/green] {label}: {kinds}")

        if report.error:
            self.console.print(f"  [bold red]Error:[/bold red] {report.error}")
        elif report.written:
            self.console.print(f"  [bold green]Saved manifest to:[/bold green] {report.output_path}")
        elif report.output_path:
            self.console.print(f"  [dim]Dry run: would write {report.output_path}[/dim]")
        else:
            self.console.print("  [dim]No manifests generated; nothing written.[/dim]")

    def print_final_table(self, reports: list):
        """
        Builds the summary table shown at the very end of a run.
        """
        table = Table(title="Kamut Execution Report", show_lines=True, header_style="bold magenta")
        table.add_column("File Path", style="cyan")
        table.add_column("Output", style="white")
        table.add_column("Manifests", justify="right")
        table.add_column("Status", style="bold")
        table.add_column("Result", justify="center")

        for r in reports:
            status_color = "red" if not r.success else "yellow" if r.warnings else "green"
            result_icon = "❌" if not r.success else "⚠️" if r.warnings else "✅"
            table.add_row(
                r.file_path,
                r.output_path or "-",
                str(r.manifest_count),
                f"[{status_color}]{r.status}[/{status_color}]",
                result_icon,
            )

        self.console.print(table)

    def print_summary(self, summary: dict):
        self.console.print(Panel(
            f"[bold white]Summary Report[/bold white]\n"
            f"════════════════════════════════════════\n"
            f"Total Files:     {summary['total_files']}\n"
            f"Files Written:   [green]{summary['written']}[/green]\n"
            f"Manifests:       {summary['manifests']}\n"
            f"Warnings:        [yellow]{summary['warnings']}[/yellow]\n"
            f"Failures:        [red]{summary['failures']}[/red]",
            border_style="dim"
        ))
