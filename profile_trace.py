#!/usr/bin/env python3
"""
Stylus Trace Studio - command-line interface
"""

import argparse
import logging
import sys

from stylus_trace import __version__, TraceProfiler, ProfileConfig, SCHEMA_VERSION
from stylus_trace.core.config import DEFAULT_RPC_URL, DEFAULT_TOP_PATHS
from stylus_trace.core.errors import StylusTraceError
from stylus_trace.flamegraph import FlamegraphConfig, generate_flamegraph, parse_palette
from stylus_trace.formatters import format_gas, generate_text_summary
from stylus_trace.storage import read_profile, write_profile, write_svg


def build_parser():
    parser = argparse.ArgumentParser(
        prog='stylus-trace',
        description='Performance profiling for Arbitrum Stylus transactions.',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python profile_trace.py capture --tx 0xabc... --flamegraph flame.svg
  python profile_trace.py capture --trace-file trace.json --summary
  python profile_trace.py validate --file profile.json
  python profile_trace.py schema --show
        """
    )
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose logging')
    subparsers = parser.add_subparsers(dest='command', required=True)
    
    capture = subparsers.add_parser('capture', help='Capture and profile a transaction')
    capture.add_argument('-r', '--rpc', default=DEFAULT_RPC_URL, help='RPC endpoint URL')
    capture.add_argument('-t', '--tx', default=None, help='Transaction hash to profile')
    capture.add_argument('--trace-file', default=None,
                         help='Profile a saved debug_traceTransaction JSON file instead of calling the RPC')
    capture.add_argument('-o', '--output', default='profile.json', help='Output path for JSON profile')
    capture.add_argument('-f', '--flamegraph', default=None, help='Output path for SVG flamegraph')
    capture.add_argument('--top-paths', type=int, default=DEFAULT_TOP_PATHS,
                         help='Number of top hot paths to include')
    capture.add_argument('--merge-threshold', type=int, default=0,
                         help='Fold stacks lighter than this gas amount into "other"')
    capture.add_argument('--title', default=None, help='Flamegraph title')
    capture.add_argument('--palette', default='hot',
                         help='Flamegraph color palette (hot, mem, io, java, consistent)')
    capture.add_argument('--width', type=int, default=1200, help='Flamegraph width in pixels')
    capture.add_argument('--summary', action='store_true', help='Print text summary to stdout')
    
    validate = subparsers.add_parser('validate', help='Validate a profile JSON file')
    validate.add_argument('-f', '--file', required=True, help='Path to profile JSON file')
    
    schema = subparsers.add_parser('schema', help='Display schema information')
    schema.add_argument('--show', action='store_true', help='Show full schema details')
    
    subparsers.add_parser('version', help='Display version information')
    return parser


def run_capture(args):
    if not args.tx and not args.trace_file:
        raise ValueError("either --tx or --trace-file is required")
    if args.width <= 0:
        raise ValueError("--width must be positive")
    
    config = ProfileConfig(
        top_paths=args.top_paths,
        merge_threshold=args.merge_threshold,
        rpc_url=args.rpc
    )
    profiler = TraceProfiler(config)
    
    print(f"\nConfiguration:")
    if args.trace_file:
        print(f"  Trace file: {args.trace_file}")
    else:
        print(f"  RPC endpoint: {args.rpc}")
    print(f"  Transaction: {args.tx or 'unknown'}")
    print(f"  Top paths: {args.top_paths}\n")
    
    if args.trace_file:
        result = profiler.profile_trace_file(args.trace_file, args.tx or 'unknown')
    else:
        result = profiler.profile_transaction(args.tx)
    
    write_profile(result.profile, args.output)
    print(f"Profile written to {args.output}")
    
    if args.flamegraph:
        fg_config = FlamegraphConfig().with_palette(parse_palette(args.palette)).with_width(args.width)
        if args.title:
            fg_config = fg_config.with_title(args.title)
        svg = generate_flamegraph(result.stacks, fg_config)
        write_svg(svg, args.flamegraph)
        print(f"Flamegraph written to {args.flamegraph}")
    
    parsed = result.parsed_trace
    backfilled = ' (from step costs)' if result.total_gas_backfilled else ''
    print(f"\nTotal gas: {format_gas(parsed.total_gas_used)}{backfilled}")
    print(f"Steps: {len(parsed.execution_steps)} ({parsed.dropped_steps} malformed steps dropped)")
    print(f"HostIO calls: {parsed.hostio_stats.total_calls()}")
    print(f"Unique stacks: {len(result.stacks)}")
    
    if args.summary:
        print()
        print(generate_text_summary(result.stacks, args.top_paths))
    
    print(f"\n✓ Capture complete!")


def run_validate(args):
    print(f"Validating profile: {args.file}")
    profile = read_profile(args.file)
    
    print("✓ Valid profile JSON")
    print(f"  Version: {profile.version}")
    print(f"  Transaction: {profile.transaction_hash}")
    print(f"  Total Gas: {profile.total_gas}")
    print(f"  HostIO Calls: {profile.hostio_summary.total_calls}")
    print(f"  Hot Paths: {len(profile.hot_paths)}")


def display_schema(show_details):
    print("Stylus Trace Studio Profile Schema")
    print(f"Current Version: {SCHEMA_VERSION}")
    print()
    
    if show_details:
        print("Schema Structure:")
        print("  version: string          - Schema version (e.g., '1.0.0')")
        print("  transaction_hash: string - Transaction hash")
        print("  total_gas: number        - Total gas used")
        print("  hostio_summary: object   - HostIO event statistics")
        print("    total_calls: number    - Total HostIO calls")
        print("    by_type: object        - Breakdown by HostIO type")
        print("    total_hostio_gas: number - Gas consumed by HostIO")
        print("  hot_paths: array         - Top gas-consuming execution paths")
        print("    stack: string          - Stack trace")
        print("    gas: number            - Gas consumed")
        print("    percentage: number     - Percentage of total gas")
        print("    source_hint: object?   - Source location (if available)")
        print("  generated_at: string     - ISO 8601 timestamp")
    else:
        print("Use --show for detailed schema information")


def display_version():
    print(f"Stylus Trace Studio v{__version__}")
    print(f"Profile Schema: v{SCHEMA_VERSION}")


def main(argv=None):
    args = build_parser().parse_args(argv)
    
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(levelname)s %(name)s: %(message)s'
    )
    
    try:
        if args.command == 'capture':
            run_capture(args)
        elif args.command == 'validate':
            run_validate(args)
        elif args.command == 'schema':
            display_schema(args.show)
        elif args.command == 'version':
            display_version()
    except FileNotFoundError as e:
        print(f"error: file not found: {e.filename}", file=sys.stderr)
        return 1
    except (StylusTraceError, ValueError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
