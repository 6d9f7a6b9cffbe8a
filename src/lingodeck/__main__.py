"""Module entrypoint for `python -m lingodeck`."""

from lingodeck.interface.cli import app

if __name__ == "__main__":  # pragma: no cover
    app()
