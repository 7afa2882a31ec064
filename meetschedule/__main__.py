"""
Package entry point.

Allows running the application via:

    python -m meetschedule

This simply forwards execution to meetschedule.cli.main().
"""

from meetschedule.cli import main

if __name__ == "__main__":
    main()
