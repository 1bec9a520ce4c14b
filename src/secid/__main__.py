"""
SecID CLI entry point.

Usage:
    python -m secid detect TOKEN
    python -m secid scan [TEXT]
"""

from secid.cli import main

if __name__ == "__main__":
    main()
