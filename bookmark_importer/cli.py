"""
Command-line interface for the Bookmark Importer.

Imports a Chrome bookmark export or an Arc sidebar, optionally filters it
with a search query, merges it into a workspace store and prints the
resulting trees.
"""

import argparse
import json
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.markup import escape
from rich.tree import Tree

from bookmark_importer import __version__
from bookmark_importer.config.configuration import Configuration
from bookmark_importer.core.data_models import (
    ArcImportResult,
    Folder,
    ImportOutcome,
    ImportWorkspace,
    Node,
    count_nodes,
)
from bookmark_importer.core.filters import filter_nodes
from bookmark_importer.core.import_module import MultiFormatImporter
from bookmark_importer.core.workspace_store import WorkspaceStore
from bookmark_importer.utils.logging_setup import setup_logging
from bookmark_importer.utils.validation import (
    ValidationError,
    validate_config_file,
    validate_input_file,
    validate_search_query,
)

# --arc given without a file
ARC_DEFAULT_LOCATION = "__default__"


class CLIInterface:
    """Command line interface for importing browser bookmarks."""

    def __init__(self):
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """Create the argument parser."""
        parser = argparse.ArgumentParser(
            prog="bookmark-importer",
            description="Import Chrome and Arc bookmarks into workspaces",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog="""
Examples:
  bookmark-importer --chrome bookmarks_export.html
  bookmark-importer --arc
  bookmark-importer --arc ~/backup/StorableSidebar.json --search python
  bookmark-importer --input bookmarks_export.html --json
  bookmark-importer --create-config user_config.toml

Configuration:
  Settings can be provided via a TOML or JSON file passed with --config.
  Environment variables: BOOKMARK_IMPORTER_ARC_SIDEBAR,
  BOOKMARK_IMPORTER_LOG_LEVEL
            """,
        )

        parser.add_argument(
            "--version", "-V", action="version", version=f"%(prog)s {__version__}"
        )

        source = parser.add_mutually_exclusive_group()
        source.add_argument(
            "--chrome",
            metavar="FILE",
            help="Chrome bookmarks HTML export to import",
        )
        source.add_argument(
            "--arc",
            metavar="FILE",
            nargs="?",
            const=ARC_DEFAULT_LOCATION,
            help="Arc StorableSidebar.json to import. Without FILE the configured "
            "or standard Arc location is used.",
        )
        source.add_argument(
            "--input",
            "-i",
            metavar="FILE",
            help="Bookmark file of either format, detected automatically",
        )
        source.add_argument(
            "--create-config",
            metavar="PATH",
            help="Write a sample configuration file (.toml or .json) and exit",
        )

        parser.add_argument(
            "--search",
            "-s",
            metavar="QUERY",
            help="Only show links and folders matching QUERY",
        )
        parser.add_argument(
            "--config",
            "-c",
            help="Configuration file path (TOML or JSON format)",
        )
        parser.add_argument(
            "--workspace-name",
            help="Name of the workspace created by a Chrome import",
        )
        parser.add_argument(
            "--json",
            dest="json_output",
            action="store_true",
            help="Print the imported workspaces as JSON instead of a tree",
        )
        parser.add_argument(
            "--log-file",
            help="Also write log output to this file",
        )
        parser.add_argument(
            "--verbose",
            "-v",
            action="store_true",
            help="Enable debug logging",
        )

        return parser

    def parse_args(self, args=None) -> argparse.Namespace:
        """Parse command line arguments."""
        return self.parser.parse_args(args)

    def validate_args(self, args: argparse.Namespace) -> dict:
        """
        Validate arguments and return processed values.

        Args:
            args: Parsed arguments from argparse

        Returns:
            Dictionary of validated and processed arguments

        Raises:
            ValidationError: If no import source is given or a path is invalid
        """
        if not (args.chrome or args.arc or args.input):
            raise ValidationError("Choose a source: --chrome FILE, --arc [FILE] or --input FILE")

        arc_path = None
        if args.arc and args.arc != ARC_DEFAULT_LOCATION:
            arc_path = validate_input_file(args.arc)

        return {
            "chrome_path": validate_input_file(args.chrome),
            "use_arc": bool(args.arc),
            "arc_path": arc_path,
            "input_path": validate_input_file(args.input),
            "config_path": validate_config_file(args.config),
            "search": validate_search_query(args.search),
            "workspace_name": args.workspace_name,
            "json_output": args.json_output,
            "log_file": args.log_file,
            "verbose": args.verbose,
        }

    def process_arguments(self, validated_args: dict) -> Configuration:
        """
        Load configuration, apply argument overrides and set up logging.

        Raises:
            ValidationError: If the configuration file is invalid
        """
        try:
            config = Configuration(validated_args["config_path"])
            config.update_from_args(validated_args)
        except ValueError as e:
            raise ValidationError(str(e))

        setup_logging(config.config)
        return config

    def _handle_create_config(self, output_path: str) -> int:
        """Write a sample configuration file."""
        path = Path(output_path).expanduser()
        config_format = "json" if path.suffix.lower() == ".json" else "toml"

        if path.exists():
            print(f"Configuration file already exists: {path}", file=sys.stderr)
            return 1

        try:
            Configuration().create_sample_config(path, config_format)
        except (OSError, ValueError) as e:
            print(f"Error creating configuration file: {e}", file=sys.stderr)
            return 1

        print(f"Created sample configuration: {path}")
        return 0

    def _run_import(
        self, validated_args: dict, config: Configuration, importer: MultiFormatImporter
    ) -> ImportOutcome:
        if validated_args["chrome_path"] is not None:
            return importer.import_chrome(validated_args["chrome_path"])

        if validated_args["use_arc"]:
            return importer.import_arc(config.arc_sidebar_path())

        return importer.import_file(validated_args["input_path"])

    def run(self, args=None) -> int:
        """Execute CLI interface."""
        try:
            parsed_args = self.parse_args(args)

            if parsed_args.create_config:
                return self._handle_create_config(parsed_args.create_config)

            validated_args = self.validate_args(parsed_args)
            config = self.process_arguments(validated_args)

            logger = logging.getLogger(__name__)
            logger.info("Bookmark Importer CLI starting")

            with MultiFormatImporter(config.config) as importer:
                outcome = self._run_import(validated_args, config, importer)

            if outcome.failed:
                print(f"Import failed: {outcome.error.message}", file=sys.stderr)
                return 1

            result = outcome.value
            if isinstance(result, ArcImportResult):
                imported = result.workspaces
            else:
                imported = [result.workspace]

            query = validated_args["search"]
            if query:
                imported = [
                    replace(workspace, nodes=filter_nodes(workspace.nodes, query))
                    for workspace in imported
                ]

            store = WorkspaceStore()
            store.apply_import(imported)
            logger.info(f"Store now holds {len(store.workspaces)} workspaces")

            if validated_args["json_output"]:
                print(json.dumps(build_json_report(result, imported, query), indent=2))
            else:
                render_import(Console(), result, imported, query)

            return 0

        except ValidationError as e:
            print(f"Validation Error: {e}", file=sys.stderr)
            return 1
        except Exception as e:
            print(f"Error: {e}", file=sys.stderr)
            logging.getLogger(__name__).exception("Unexpected error in CLI")
            return 1


def build_json_report(result, workspaces: List[ImportWorkspace], query: Optional[str]) -> dict:
    """JSON-serializable summary of an import and its (filtered) workspaces."""
    report = {
        "links_imported": result.links_imported,
        "folders_imported": result.folders_imported,
        "workspaces_created": len(workspaces),
        "workspaces": [workspace.to_dict() for workspace in workspaces],
    }
    if query:
        report["search"] = query
        report["matching_links"] = sum(count_nodes(ws.nodes).links for ws in workspaces)
    return report


def _add_branch(tree: Tree, nodes: List[Node]) -> None:
    for node in nodes:
        if isinstance(node, Folder):
            branch = tree.add(f"[bold]{escape(node.name)}/[/bold]")
            _add_branch(branch, node.children)
        else:
            tree.add(f"{escape(node.title)} [dim]{escape(node.url)}[/dim]")


def render_import(
    console: Console, result, workspaces: List[ImportWorkspace], query: Optional[str]
) -> None:
    """Print an import summary and one tree per workspace."""
    console.print(
        f"[green]Imported {result.links_imported} links and "
        f"{result.folders_imported} folders into {len(workspaces)} workspace(s)[/green]"
    )
    if query:
        matches = sum(count_nodes(ws.nodes).links for ws in workspaces)
        console.print(f"Search {escape(query)!r}: {matches} matching links")

    for workspace in workspaces:
        label = f"[bold]{escape(workspace.name)}[/bold] [dim]({workspace.color_id.display_name})[/dim]"
        if workspace.browser_profile:
            label += f" [dim]profile: {escape(workspace.browser_profile)}[/dim]"
        tree = Tree(label)
        _add_branch(tree, workspace.nodes)
        console.print(tree)


def main(args=None):
    """Main entry point for the CLI."""
    cli = CLIInterface()
    return cli.run(args)


if __name__ == "__main__":
    sys.exit(main())
