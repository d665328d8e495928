"""
Command-line interface for the routine compiler.
"""

import argparse
import json
import logging
import os
import sys
from typing import List, TextIO

from cwise.cwise_compiler import RoutineCompiler
from cwise.cwise_config import CwiseConfig
from cwise.cwise_exceptions import CwiseError
from cwise.cwise_types import CompiledRoutine


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog='cwise',
        description="Compile JavaScript elementwise routines for kernel inlining",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s add.js                         # Print compiled routine as JSON
  %(prog)s add.js scale.js --format text  # Readable report for two routines
  %(prog)s kernel.js --global lookup      # Treat 'lookup' as an ambient global
  %(prog)s kernel.js --config cwise.yaml  # Load globals from a YAML file
        """
    )

    parser.add_argument('files', nargs='+', help='Routine source files, one function each')
    parser.add_argument('--config', '-c', help='YAML configuration file path')
    parser.add_argument('--global', '-g', dest='extra_globals', action='append', default=[],
                        metavar='NAME', help='Additional ambient global (repeatable)')
    parser.add_argument('--format', '-f', choices=['json', 'text'], default='json',
                        help='Output format')
    parser.add_argument('--output', '-o', help='Output file path')
    parser.add_argument('--verbose', '-v', action='store_true', help='Verbose output')
    return parser


def main(argv: List[str] | None = None) -> int:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format='%(name)s: %(message)s')

    try:
        config = CwiseConfig.load_from_file(args.config) if args.config else CwiseConfig()
        config = config.with_globals(args.extra_globals)
        compiler = RoutineCompiler(config=config)

        routines = []
        for path in args.files:
            if not os.path.exists(path):
                print(f"Routine file not found: {path}", file=sys.stderr)
                return 1

            with open(path, 'r', encoding='utf-8') as f:
                source = f.read()

            routines.append((path, compiler.compile(source.strip())))

    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    except CwiseError as e:
        print(f"Error: {e}", file=sys.stderr)
        if e.error_details:
            for key, value in e.error_details.items():
                print(f"  {key}: {value}", file=sys.stderr)

        return 1

    if args.output:
        with open(args.output, 'w', encoding='utf-8') as f:
            write_results(routines, args.format, f)

        print(f"Results saved to: {args.output}")

    else:
        write_results(routines, args.format, sys.stdout)

    return 0


def write_results(routines: List[tuple[str, CompiledRoutine]], output_format: str, out: TextIO) -> None:
    """Write compiled routines in the requested format."""
    if output_format == 'json':
        data = [dict(file=path, **routine.to_dict()) for path, routine in routines]
        json.dump(data, out, indent=2)
        out.write('\n')
        return

    for path, routine in routines:
        out.write(f"{path}\n")
        out.write(f"  body: {routine.body}\n")
        for i, arg in enumerate(routine.args):
            usage = ''.join([
                'w' if arg.is_written else '-',
                'r' if arg.is_read else '-'
            ])
            out.write(f"  arg {i}: {arg.name} [{usage}] x{arg.occurrence_count}\n")

        out.write(f"  this vars: {', '.join(routine.this_vars) or '(none)'}\n")
        out.write(f"  local vars: {', '.join(routine.local_vars) or '(none)'}\n")
