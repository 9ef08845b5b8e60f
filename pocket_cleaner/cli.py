"""
Command-line interface for the Pocket Cleaner.

This module provides the CLI for cleaning Pocket CSV exports: it resolves
the input files, deduplicates bookmarks by URL, writes the cleaned CSV and
optionally upserts the result into an SQLite table.
"""

import argparse
import logging
import sys
from pathlib import Path

from pocket_cleaner import __version__
from pocket_cleaner.config.configuration import Configuration
from pocket_cleaner.config.pydantic_config import ConfigurationManager
from pocket_cleaner.core.pipeline import CleaningPipeline
from pocket_cleaner.utils.error_handler import (
    PocketCleanerError,
    SchemaMismatchError,
    UsageError,
)
from pocket_cleaner.utils.logging_setup import setup_logging


class CLIInterface:
    """Command line interface for the cleaning pipeline."""

    def __init__(self):
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """Create argument parser."""
        parser = argparse.ArgumentParser(
            prog="pocket-cleaner",
            description="Normalize and deduplicate Pocket CSV exports",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog="""
Examples:
  pocket-cleaner pocket_export.csv
  pocket-cleaner exports/
  pocket-cleaner exports/ --destination-path=pocket.db
  pocket-cleaner exports/ --output cleaned.csv --verbose
  pocket-cleaner --create-config toml

Output:
  The cleaned CSV is written to ../output/cleaned_links.csv unless --output
  or the [output] path setting says otherwise. With --destination-path the
  records are also upserted into an SQLite table keyed by URL.

Configuration:
  Settings are read from --config, or from pocket_cleaner.toml /
  pocket_cleaner.json in the current directory when present.
            """,
        )

        parser.add_argument(
            "--version", "-V", action="version", version=f"%(prog)s {__version__}"
        )
        parser.add_argument(
            "input",
            nargs="?",
            help="Pocket CSV export, or a directory of CSV exports",
        )
        parser.add_argument(
            "--destination-path",
            "-d",
            help="SQLite database to upsert cleaned records into",
        )
        parser.add_argument(
            "--output",
            "-o",
            help="Cleaned CSV path (default: ../output/cleaned_links.csv)",
        )
        parser.add_argument(
            "--config",
            "-c",
            help="Configuration file path (TOML or JSON format)",
        )
        parser.add_argument(
            "--create-config",
            choices=["toml", "json"],
            help="Write a sample configuration file (pocket_cleaner.toml or "
            "pocket_cleaner.json) to the current directory and exit",
        )
        parser.add_argument(
            "--verbose",
            "-v",
            action="store_true",
            help="Enable debug logging and print a duplicate summary",
        )

        return parser

    def parse_args(self, args=None) -> argparse.Namespace:
        """Parse command line arguments."""
        return self.parser.parse_args(args)

    def validate_args(self, args: argparse.Namespace) -> dict:
        """
        Validate arguments and return processed values.

        Raises:
            UsageError: If no input path was given
        """
        if not args.input:
            raise UsageError(
                "Usage: pocket-cleaner <file.csv|directory> [--destination-path=<path>]"
            )

        return {
            "input_path": Path(args.input),
            "destination_path": Path(args.destination_path) if args.destination_path else None,
            "output_path": args.output,
            "config_path": Path(args.config) if args.config else None,
            "verbose": args.verbose,
        }

    def _handle_create_config(self, config_format: str) -> int:
        """Write a sample configuration file into the working directory."""
        output_path = Path(f"pocket_cleaner.{config_format}")

        if output_path.exists():
            print(
                f"Configuration file '{output_path}' already exists; not overwriting.",
                file=sys.stderr,
            )
            return 1

        try:
            ConfigurationManager.create_sample_config(output_path, format=config_format)
        except OSError as e:
            print(f"Error: Could not write {output_path}: {e}", file=sys.stderr)
            return 1

        print(f"Created configuration file: {output_path}")
        return 0

    def process_arguments(self, validated_args: dict) -> Configuration:
        """Load configuration, apply CLI overrides and set up logging."""
        config = Configuration(validated_args["config_path"])
        config.update_from_args(validated_args)

        setup_logging(config.get_log_level(), config.get_log_file())

        return config

    def run(self, args=None) -> int:
        """Execute CLI interface."""
        try:
            parsed_args = self.parse_args(args)
        except SystemExit as e:
            # --help and --version exit 0; argparse usage errors become 1
            return 0 if e.code in (0, None) else 1

        if parsed_args.create_config:
            return self._handle_create_config(parsed_args.create_config)

        logger = logging.getLogger(__name__)

        try:
            validated_args = self.validate_args(parsed_args)
            config = self.process_arguments(validated_args)

            logger.info("Pocket Cleaner starting")
            logger.info(f"Input: {validated_args['input_path']}")
            logger.info(f"Output: {config.get_output_path()}")

            destination = validated_args["destination_path"]
            pipeline = CleaningPipeline.from_configuration(
                config, destination=destination, progress=print
            )
            result = pipeline.run(validated_args["input_path"], config.get_output_path())

            if destination is not None:
                print(f"Upserted {result.upserted_count} records into {destination}")

            if validated_args["verbose"] and result.duplicates is not None:
                print(result.duplicates.get_summary())

            return 0

        except SchemaMismatchError as e:
            print(e.describe(), file=sys.stderr)
            return 1
        except UsageError as e:
            print(e, file=sys.stderr)
            return 1
        except PocketCleanerError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        except Exception as e:
            print(f"Error: {e}", file=sys.stderr)
            logger.exception("Unexpected error in CLI")
            return 1


def main(args=None) -> int:
    """Main entry point for the CLI."""
    cli = CLIInterface()
    return cli.run(args)


if __name__ == "__main__":
    sys.exit(main())
