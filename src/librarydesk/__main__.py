"""Main entry point for the librarydesk package."""

from librarydesk.cli import app


if __name__ == "__main__":
    app()
