"""
Package entry point.

Allows running the application via:

    python -m portalsdk

This simply forwards execution to portalsdk.cli.main().
"""

from portalsdk.cli import main

if __name__ == "__main__":
    main()
