"""
Main entry point for the kousei package.

This allows the package to be run as a module:
python -m kousei
"""

from .cli.commands import main

if __name__ == '__main__':
    main()
