"""Entry point for running the CLI as a module.

Usage:
    python -m bumba.interfaces.cli route implement user authentication
    python -m bumba.interfaces.cli specialists --department experience
"""

if __name__ == "__main__":
    # Import inside if __name__ to avoid RuntimeWarning about module already loaded
    from bumba.interfaces.cli.app import main
    main()
