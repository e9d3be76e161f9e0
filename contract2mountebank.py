#!/usr/bin/env python3
"""
contract2mountebank - Mountebank stub generator for HTTP contracts

This is a convenience wrapper that calls the package implementation.
The actual implementation is in src/contractmb/cli.py

Usage:
    python contract2mountebank.py contracts/ -o stubs/
"""

import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent / "src"))

from contractmb.cli import main

if __name__ == '__main__':
    sys.exit(main())
