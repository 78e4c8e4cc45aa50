#!/usr/bin/env python3
"""
KAMUT CLI
---------
Command-line entry point. Finds kamut files by glob pattern, renders their
manifests and reports per file and per document.

    kamut [PATTERN ...]
    kamut generate [PATTERN ...]
    kamut version

Exits 1 when any file failed, 0 otherwise.

Author: Kamut Team
Date: 2026-10-16
"""

import argparse
import dataclasses
import logging
import sys
from typing import List, Optional

from rich.panel import Panel

from kamut.cli.formatter import KamutFormatter, console
from kamut.core.engine import ManifestEngine
from kamut.core.settings import GeneratorSettings

__version__ = "0.1.0"

COMMANDS = ("generate", "version")

logger = logging.getLogger("kamut.cli")


class KamutCLI:
    """
    CLI wrapper that translates user commands into engine runs.
    """

    def __init__(self, settings: Optional[GeneratorSettings] = None):
        self.settings = settings or GeneratorSettings.from_env()
        self.formatter = KamutFormatter()
        self.parser = argparse.ArgumentParser(
            prog="kamut",
            description="Kamut - render Kubernetes manifests from *.kamut.yaml files",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog=(
                "Commands:\n"
                "  generate [PATTERN ...]  Render manifests (the default)\n"
                "  version                 Print the kamut version\n\n"
                f"PATTERN defaults to '{self.settings.default_pattern}'."
            ),
        )
        self._setup_args()

    def _setup_args(self):
        """Configures the command-line flags. The command word is optional."""
        self.parser.add_argument("-V", "--version", action="version", version=f"kamut v{__version__}")
        self.parser.add_argument("targets", nargs="*", metavar="PATTERN",
                                 help="File glob pattern(s), optionally preceded by a command")
        self.parser.add_argument("-n", "--name", help="Only process NAME.kamut.yaml")
        self.parser.add_argument("--infer-kind", action="store_true",
                                 help="Infer a missing 'kind' from the populated fields instead of failing")
        self.parser.add_argument("--dry-run", action="store_true", help="Render without writing output files")
        self.parser.add_argument("--fail-fast", action="store_true", help="Stop at the first file that fails")
        self.parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    def print_header(self, subtitle: str):
        console.print(Panel.fit(
            f"[bold cyan]Kamut v{__version__}[/bold cyan]",
            title=f"[bold white]{subtitle}[/bold white]",
            border_style="cyan"
        ))

    def resolve_patterns(self, args: argparse.Namespace) -> List[str]:
        """Turns the positional targets (minus any command word) into glob patterns."""
        targets = list(args.targets)
        if targets and targets[0] in COMMANDS:
            targets = targets[1:]
        if args.name:
            targets.append(f"{args.name}.kamut.yaml")
        return targets or [self.settings.default_pattern]

    def _run_engine(self, args: argparse.Namespace) -> int:
        """Main processing loop orchestration."""
        settings = dataclasses.replace(
            self.settings,
            require_kind=self.settings.require_kind and not args.infer_kind,
            dry_run=args.dry_run,
        )
        logger.debug(f"Running with {settings}")
        engine = ManifestEngine(settings)

        files = engine.find_all(self.resolve_patterns(args))
        reports = engine.run_files(files, fail_fast=args.fail_fast,
                                   on_report=self.formatter.show_file_report)

        if not reports:
            console.print("[bold yellow]No matching kamut files found[/bold yellow]")
            return 0

        self.formatter.print_final_table(reports)
        summary = engine.generate_summary(reports)
        self.formatter.print_summary(summary)
        return 1 if summary["failures"] else 0

    def run(self, argv: Optional[List[str]] = None) -> int:
        """Primary routing entry point. Returns the process exit code."""
        args = self.parser.parse_intermixed_args(argv)
        logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

        if args.targets and args.targets[0] == "version":
            console.print(f"kamut v{__version__}")
            return 0

        self.print_header("Manifest Generator")
        return self._run_engine(args)


def main():
    """Application entry point with interrupt handling."""
    try:
        sys.exit(KamutCLI().run())
    except KeyboardInterrupt:
        console.print("\n[bold red]Terminated by user.[/bold red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
