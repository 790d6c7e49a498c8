"""Main CLI entry point for depdedupe."""

import argparse
import logging
import sys
from typing import List, Optional

from . import __version__
from .criteria import compare
from .errors import DedupeError
from .formatters import OutputFormatter
from .models import Criterion, Package
from .parsers import FileParser
from .resolution import dedupe_packages

logger = logging.getLogger(__name__)

CRITERIA_CHOICES = [c.value for c in Criterion]


def setup_logging(verbose: bool = False, log_level: Optional[str] = None):
    """Configure logging based on verbosity flags."""
    if log_level:
        level = getattr(logging, log_level.upper(), logging.WARNING)
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format='%(levelname)s: %(message)s'
    )


def handle_dedupe(args):
    """Handle the 'dedupe' subcommand."""
    setup_logging(args.verbose, args.loglevel)

    logger.info(f"Input: {args.input} (format={args.input_format})")
    logger.info(f"Output: {args.output} (format={args.output_format}, criteria={args.criteria})")

    packages: List[Package]
    try:
        packages = FileParser.parse(args.input, args.input_format)
    except Exception as e:
        logger.error(f"Error parsing input file: {e}")
        print(f"Error parsing input file: {e}", file=sys.stderr)
        return 1

    if not packages:
        logger.error("No valid packages found in the input file")
        print("No valid packages found in the input file. Check format and try again.", file=sys.stderr)
        return 1

    logger.info(f"Loaded {len(packages)} packages from the input file")

    try:
        result = dedupe_packages(packages, args.criteria)
    except ValueError as e:
        logger.error(f"Error deduping packages: {e}")
        print(f"Error deduping packages: {e}", file=sys.stderr)
        return 1

    # Generate output based on format
    try:
        if args.output_format == 'list':
            output = OutputFormatter.format_as_list(result.winners)
        elif args.output_format == 'json':
            output = OutputFormatter.format_as_json(result)
        elif args.output_format == 'sbom':
            output = OutputFormatter.format_as_sbom(result)
        else:  # report (default)
            output = OutputFormatter.format_as_report(result)
    except Exception as e:
        logger.error(f"Error generating output: {e}")
        print(f"Error generating output: {e}", file=sys.stderr)
        return 1

    # Write output
    try:
        if args.output == '-':
            print(output, end='')
        else:
            with open(args.output, 'w') as f:
                f.write(output)
            logger.info(f"Output written to: {args.output}")
            print(f"Output written to: {args.output}")
    except OSError as e:
        logger.error(f"Error writing output: {e}")
        print(f"Error writing output: {e}", file=sys.stderr)
        return 1

    return 0


def handle_compare(args):
    """Handle the 'compare' subcommand."""
    setup_logging(args.verbose, args.loglevel)

    try:
        comparison = compare(args.criteria, args.given, args.cached)
    except DedupeError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if not comparison.satisfied:
        print(f"{args.given} and {args.cached} are not compatible under '{args.criteria}'")
    elif comparison.cached_is_latest:
        print(f"compatible under '{args.criteria}': cached {args.cached} wins over {args.given}")
    else:
        print(f"compatible under '{args.criteria}': given {args.given} replaces {args.cached}")
    return 0


def _add_logging_flags(parser: argparse.ArgumentParser) -> None:
    parser.add_argument('-v', '--verbose', action='store_true', help='Verbose output')
    parser.add_argument('--loglevel', choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        help='Set log level')


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog='depdedupe',
        description='Collapse redundant package versions under a compatibility criterion'
    )
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')

    subparsers = parser.add_subparsers(dest='command', help='Subcommands')

    # Dedupe command
    dedupe_parser = subparsers.add_parser('dedupe', help='Dedupe a package list or SBOM')
    dedupe_parser.add_argument('input', help='Input file or URL (CycloneDX SBOM or flat list)')
    dedupe_parser.add_argument('output', nargs='?', default='-',
                               help='Output file (default: stdout, use - for stdout)')
    dedupe_parser.add_argument('--criteria', default='minor', choices=CRITERIA_CHOICES,
                               help='Compatibility criterion, most to least specific. Default: minor')
    dedupe_parser.add_argument('--format', dest='output_format', default='report',
                               choices=['report', 'list', 'json', 'sbom'],
                               help='Output format (report, list, json, sbom). Default: report')
    dedupe_parser.add_argument('--input-format', dest='input_format', default='auto',
                               choices=['auto', 'flat', 'sbom'],
                               help='Input format. Default: detect from file name')
    _add_logging_flags(dedupe_parser)
    dedupe_parser.set_defaults(func=handle_dedupe)

    # Compare command
    compare_parser = subparsers.add_parser('compare', help='Compare two versions under a criterion')
    compare_parser.add_argument('given', help='Newly encountered version')
    compare_parser.add_argument('cached', help='Previously cached version')
    compare_parser.add_argument('--criteria', default='minor', choices=CRITERIA_CHOICES,
                                help='Compatibility criterion. Default: minor')
    _add_logging_flags(compare_parser)
    compare_parser.set_defaults(func=handle_compare)

    return parser


def main(argv: Optional[List[str]] = None):
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    # Execute command
    try:
        return args.func(args)
    except Exception as e:
        logger.exception(f"Unexpected error: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
