"""
Package entry point.

Allows running the application via:

    python -m semesterfee

This simply forwards execution to semesterfee.cli.main().
"""

from semesterfee.cli import main

if __name__ == "__main__":
    main()
