#!/usr/bin/env python3
"""
contract2mountebank - Mountebank stub generator for HTTP contracts

Converts YAML contract files into Mountebank stub documents (.ejs).

Usage:
    contract2mountebank contracts/ -o stubs/
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .contract import ContractLoader, ContractLoadError
from .convert import StubConverter, ConverterConfig, ContractStructureError


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Returns:
        Namespace object with parsed arguments
    """
    parser = argparse.ArgumentParser(
        prog='contract2mountebank',
        description='Generate Mountebank stubs from YAML HTTP contracts',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Convert one contract file, stubs written next to it
  %(prog)s contracts/get_users.yml

  # Convert every contract under a directory
  %(prog)s contracts/ -o stubs/

  # Fail on contracts missing a response, method or URL
  %(prog)s contracts/ -o stubs/ --strict

  # Preview without writing files
  %(prog)s contracts/ --dry-run
        """
    )

    parser.add_argument('inputs',
                        nargs='+',
                        help='Contract files or directories (*.yml, *.yaml)')

    parser.add_argument('-o', '--output',
                        help='Output directory for stub files (default: next to each contract)')

    parser.add_argument('--config', '-c',
                        help='Converter config YAML file')

    parser.add_argument('--strict',
                        action='store_true',
                        help='Abort when a contract misses a required part')

    parser.add_argument('--indent',
                        type=int,
                        help='Stub JSON indent (default: 2)')

    parser.add_argument('--dry-run',
                        action='store_true',
                        help='Show what would be written without writing files')

    parser.add_argument('--report',
                        help='Write conversion issues to a JSON report file')

    parser.add_argument('--verbose', '-v',
                        action='store_true',
                        help='Enable debug logging')

    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> ConverterConfig:
    """Config file values, overridden by command-line flags."""
    config = ConverterConfig.from_yaml(args.config) if args.config else ConverterConfig()

    if args.strict:
        config.strict = True
    if args.indent is not None:
        config.indent = args.indent
    if args.verbose:
        config.log_level = "debug"
    return config


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s'
    )

    try:
        config = build_config(args)
        converter = StubConverter(config=config)
    except (OSError, ValueError) as e:
        print(f"✗ Error loading config: {e}")
        return 1

    files = ContractLoader.discover(args.inputs)
    if not files:
        print("⚠ No contract files found")
        return 1

    failed = 0
    written = 0
    report = []
    taken = set()

    for contract_file in files:
        print(f"📄 {contract_file}")
        try:
            metadata = ContractLoader(str(contract_file)).load()
            result = converter.convert_with_report(contract_file.stem, metadata)
        except (FileNotFoundError, ContractLoadError, ContractStructureError) as e:
            print(f"  ✗ {e}")
            failed += 1
            continue

        for issue in result.issues:
            print(f"  ⚠ {issue.contract}: {issue.message}")
            report.append({**issue.to_dict(), 'file': str(contract_file)})

        if not result.documents:
            print("  ⚠ No HTTP contracts to convert")
            continue

        output_dir = Path(args.output) if args.output else contract_file.parent
        if args.dry_run:
            for path in converter.stub_paths(result.documents, output_dir, taken).values():
                print(f"  → {path}")
            continue

        for path in converter.write_stubs(result.documents, output_dir, taken):
            print(f"  ✓ {path.name}")
            written += 1

    if args.report:
        with open(args.report, 'w') as f:
            json.dump({'issues': report, 'failed_files': failed}, f, indent=2)
        print(f"📊 Report saved to {args.report}")

    print(f"\n✓ Wrote {written} stub file(s)" if not args.dry_run else "\n✓ Dry run complete")
    return 1 if failed else 0


if __name__ == '__main__':
    sys.exit(main())
