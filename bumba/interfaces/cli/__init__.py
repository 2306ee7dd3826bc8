"""Command-line interface for BUMBA.

CLI Commands:
    bumba route COMMAND [DESCRIPTION...]     Route a task and print the plan
    bumba analyze COMMAND [DESCRIPTION...]   Print the intent analysis
    bumba specialists                        List the capability table

Global Options:
    --debug/--no-debug   Log routing decisions to stderr
    --log-file PATH      Also write logs to a rotating file

Usage:
    bumba route implement python flask API with JWT auth
    bumba route design accessible dashboard ui --json
    bumba specialists --department strategic
"""

from bumba.interfaces.cli.app import cli, main

__all__ = ["cli", "main"]
