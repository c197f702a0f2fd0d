"""
Package entry point.

Allows running the application via:

    python -m centflow

This simply forwards execution to centflow.cli.main().
"""

from centflow.cli import main

if __name__ == "__main__":
    main()
