"""Main entry point for the resource mobilisation reporter"""

import asyncio
import argparse
from pathlib import Path

from orchestrator import Orchestrator
from ui.progress import ConsoleProgress, SilentProgress
from utils.logging import configure_logging
from core.enums import RecordStatus
from core.exceptions import ReporterError
from config import settings


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Resource Mobilisation Reporter - Fill an Excel template with one sheet per published report",
    )
    parser.add_argument(
        "template",
        type=Path,
        nargs="?",
        default=Path("template.xlsm"),
        help="Template workbook (default: template.xlsm)",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=settings.OUTPUT_DIR,
        help="Output directory (default: the template's directory)",
    )
    parser.add_argument(
        "--dump-paths",
        type=Path,
        default=None,
        metavar="FILE",
        help="Write every placeholder path found in the records to a CSV file",
    )
    parser.add_argument(
        "--fail-fast",
        action="store_true",
        default=settings.FAIL_FAST,
        help="Abort on the first record that cannot be processed",
    )
    parser.add_argument("--quiet", action="store_true", help="Hide progress output")
    parser.add_argument(
        "--log-level",
        type=str,
        default=settings.LOG_LEVEL,
        help="Log level for diagnostics on stderr",
    )

    args = parser.parse_args(argv)

    configure_logging(level=args.log_level)

    if not args.template.exists():
        print(f"Error: File not found: {args.template}")
        return 1

    progress = SilentProgress() if args.quiet else ConsoleProgress()

    orchestrator = Orchestrator(
        progress=progress,
        output_dir=args.output_dir,
        paths_file=args.dump_paths,
        fail_fast=args.fail_fast,
    )

    try:
        ctx = asyncio.run(orchestrator.run(str(args.template)))
    except ReporterError as e:
        print(f"\n✗ Pipeline failed: {e}")
        return 1

    output = ctx.output
    print(f"\n✓ Report complete")
    print(f"  Workbook: {output.output_path}")
    print(f"  Created: {output.created}  Skipped: {output.skipped}  Failed: {output.failed}")
    if output.paths_file_path:
        print(f"  Paths: {output.paths_file_path}")

    for result in output.results:
        if result.status == RecordStatus.FAILED:
            print(f"  ✗ {result.sheet_name}: {result.error}")

    return 2 if output.failed else 0


if __name__ == "__main__":
    exit(main())
