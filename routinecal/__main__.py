"""
Package entry point.

Allows running the application via:

    python -m routinecal

This simply forwards execution to routinecal.cli.main().
"""

from routinecal.cli import main

if __name__ == "__main__":
    main()
