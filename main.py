#!/usr/bin/env python3
"""
Mindmerge - Mind-map workbook merger

Main entry point for Mindmerge. This orchestrator scans a source directory,
merges every workbook into one master workbook and writes the result.
"""

import logging
import sys
import argparse
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import List, Optional

from mindmerge import __version__
from mindmerge.config import ConfigManager, config as default_config
from mindmerge.errors import FatalMergeError, SourceReadError
from mindmerge.importers import XMindImporter
from mindmerge.merge import MergeOptions, MergeSession, ResourceCollector
from mindmerge.models import LogEntry
from mindmerge.writer import ArchiveWriter, load_template_sheet


def setup_logging(cfg: ConfigManager, debug: bool = False):
    """
    Configure logging for the application.

    Everything goes to the log file. The console only gets log records in
    debug mode, so progress output stays readable.
    """
    level = logging.DEBUG if debug else getattr(logging, cfg.get("logging.level", "INFO").upper())
    format_str = cfg.get("logging.format", "%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    handlers = [logging.FileHandler(cfg.log_filename)]
    if debug:
        handlers.append(logging.StreamHandler(sys.stderr))

    logging.basicConfig(
        level=level,
        format=format_str,
        handlers=handlers,
        force=True
    )


def print_error_log(entries: List[LogEntry], heading: str = "Error Log:"):
    """Print an itemised list of logged problems."""
    print(f"\n{heading}")
    for entry in entries:
        print(entry.message)


def run_merge_pipeline(src_dir: str, dst_path: str, options: MergeOptions,
                       cfg: Optional[ConfigManager] = None) -> MergeSession:
    """
    Merge every workbook in src_dir into a new workbook at dst_path.

    Args:
        src_dir: Directory holding the source workbooks
        dst_path: Output workbook path
        options: Merge switches
        cfg: Configuration (the global one if None)

    Returns:
        The finished merge session

    Raises:
        FatalMergeError: If the run cannot continue
    """
    cfg = cfg or default_config
    logging.info(f"Starting merge of {src_dir} into {dst_path}")

    sys.stdout.write(f"Scanning source directory '{src_dir}' ... ")
    sys.stdout.flush()
    importer = XMindImporter(src_dir, suffix=cfg.source_suffix)
    sources = importer.list_sources()
    print(f"Done (Found {len(sources)} {cfg.source_suffix} files to merge)")

    sys.stdout.write("Loading template ... ")
    sys.stdout.flush()
    template_dir = cfg.template_directory
    master = load_template_sheet(template_dir)
    print("Done")

    with ResourceCollector(cfg.scratch_directory, max_workers=cfg.max_workers) as collector:
        session = MergeSession(master, options, collector=collector)

        sys.stdout.write("Processing files ")
        sys.stdout.flush()
        # Archives are read concurrently, merged one at a time in file name order
        with ThreadPoolExecutor(max_workers=cfg.max_workers) as pool:
            futures = [(name, pool.submit(importer.load, name)) for name in sources]
            for name, future in futures:
                try:
                    document = future.result()
                except SourceReadError as e:
                    status = session.record_source_error(name, str(e))
                else:
                    status = session.merge_source(document.content_json, document.label,
                                                  document.archive)
                sys.stdout.write(status.value)
                sys.stdout.flush()

        session.finish_ingestion()
        sys.stdout.write(" Done (")
        if session.log:
            print("Errors)")
            print_error_log(session.log.entries)
        else:
            print("No errors)")

        if options.deeper:
            sys.stdout.write("Consolidating matching top-level topics ... ")
            sys.stdout.flush()
            logged = len(session.log)
            count = session.consolidate()
            print(f"Done ({count} matches)")
            if len(session.log) > logged:
                print_error_log(session.log.entries[logged:], "Consolidation Warnings:")

        if options.sort_topics:
            sys.stdout.write("Sorting topics ... ")
            sys.stdout.flush()
            session.sort_topics()
            print("Done")

        if options.fold:
            sys.stdout.write("Folding top-level topics ... ")
            sys.stdout.flush()
            session.fold()
            print("Done")

        sys.stdout.write("Writing merged data ... ")
        sys.stdout.flush()
        ArchiveWriter(template_dir).write(session.master, collector, Path(dst_path))
        print("Done")

    print(f"\nThe merged XMind file is in {dst_path}")
    logging.info(f"Merge completed: {len(session.merged_sources)} of {len(sources)} sources merged, "
                 f"{len(session.log)} problems logged")
    return session


def parse_arguments(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Mindmerge - merge a directory of XMind workbooks into one master workbook",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py --src-dir maps/ --dst-xmind merged.xmind
  python main.py --src-dir maps/ --dst-xmind merged.xmind --deeper --src-attr
  python main.py --src-dir maps/ --dst-xmind merged.xmind --sort-topics --fold
        """
    )

    parser.add_argument(
        "--src-dir",
        required=True,
        help="The source directory with XMind files to merge"
    )

    parser.add_argument(
        "--dst-xmind",
        required=True,
        help="The new XMind file to merge into"
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Run in debug mode"
    )

    parser.add_argument(
        "--fold",
        action="store_true",
        help="Fold the merged XMind tree"
    )

    parser.add_argument(
        "--src-attr",
        action="store_true",
        help="Add a source file attribution note to each top-level topic in the merged tree, "
             "or to every topic if a deeper merge is performed"
    )

    parser.add_argument(
        "--deeper",
        action="store_true",
        help="Perform a deeper merge, consolidating matching top-level topics"
    )

    parser.add_argument(
        "--sort-topics",
        action="store_true",
        help="Sort the merged XMind tree by topic instead of by source filename"
    )

    parser.add_argument(
        "--config",
        default="config.yaml",
        help="Path to the YAML configuration file (default: config.yaml)"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"Mindmerge {__version__}"
    )

    return parser.parse_args(argv)


def main(argv=None):
    """Main entry point."""
    args = parse_arguments(argv)
    cfg = ConfigManager(args.config)
    setup_logging(cfg, debug=args.debug)

    if args.debug:
        print("Debug mode activated")

    options = MergeOptions(
        attribution=args.src_attr,
        deeper=args.deeper,
        sort_topics=args.sort_topics,
        fold=args.fold,
        debug=args.debug,
        attribution_tag=cfg.attribution_tag
    )

    try:
        run_merge_pipeline(args.src_dir, args.dst_xmind, options, cfg)

    except FatalMergeError as e:
        logging.error(f"Merge failed: {e}")
        print(f"Error ({e})")
        sys.exit(1)

    except KeyboardInterrupt:
        logging.info("Merge interrupted by user")
        print("\nReceived quit signal")
        sys.exit(130)


if __name__ == "__main__":
    main()
