import argparse
import sys
from pathlib import Path

from Codesize.core.config import SizerConfig
from Codesize.core.errors import CodesizeError
from Codesize.core.logging import set_log_level
from Codesize.report.report_driver import contract_sizes
from Codesize.report.table import oversized_contracts, render_table

def handle_contract_sizes(args) -> int:
    if args.verbose:
        set_log_level("DEBUG")
    cfg = SizerConfig.from_env_or_file()
    artifacts_dir = Path(args.artifacts) if args.artifacts else cfg.artifacts_dir
    history_path = Path(args.history) if args.history else cfg.history_path
    max_size = args.max_contract_size if args.max_contract_size is not None else cfg.max_contract_size
    min_size = args.size if args.size is not None else cfg.min_size

    if not artifacts_dir.exists():
        print(f"Artifacts dir not found: {artifacts_dir}", file=sys.stderr)
        return 2

    report = contract_sizes(
        artifacts_dir,
        contracts=args.contracts,
        min_size=min_size,
        history_path=history_path if args.diff else None,
        include_tests=args.include_tests or cfg.include_tests,
    )

    if report.measured == 0 and not report.failures:
        print("No contracts found")
        return 0
    if not report.records:
        print(f"There are no contracts exceeding {min_size} bytes")
        return 0

    print(render_table(report, details=args.details, max_contract_size=max_size))

    offenders = oversized_contracts(report.records, max_size)
    if offenders:
        print(f"\nFAIL: some contracts exceed {max_size:,} bytes of runtime code:", file=sys.stderr)
        for r in offenders:
            print(f"- {r.fully_qualified_name or r.name}: {r.code_size:,}B", file=sys.stderr)
        return 1
    return 0

def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Codesize CLI - Attribute contract bytecode size to source files.")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    sizes_parser = subparsers.add_parser(
        "contract-sizes",
        help="Print size of contracts, including contribution of source files into bytecode of a contract."
    )
    sizes_parser.add_argument("contracts", nargs="*", help="Contracts to be printed, names or FQNs.")
    sizes_parser.add_argument("--artifacts", type=str, help="Hardhat artifacts directory (default: artifacts).")
    sizes_parser.add_argument("--details", action="store_true", help="Print contribution of each source file into bytecode of a contract.")
    sizes_parser.add_argument("--diff", action="store_true", help="Print size difference with the previous run with this flag.")
    sizes_parser.add_argument("--history", type=str, help="Where sizes are kept between --diff runs.")
    sizes_parser.add_argument("--size", type=int, help="Only show contracts with code + init size of at least this many bytes.")
    sizes_parser.add_argument("--max-contract-size", type=int, help="Runtime size limit in bytes (default: 24576, EIP-170).")
    sizes_parser.add_argument("--include-tests", action="store_true", help="Include contracts from *.t.sol and *.s.sol sources.")
    sizes_parser.add_argument("-v", "--verbose", action="store_true", help="Log debug output to stderr.")
    sizes_parser.set_defaults(func=handle_contract_sizes)

    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return 0

    try:
        return args.func(args)
    except CodesizeError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

if __name__ == "__main__":
    sys.exit(main())
