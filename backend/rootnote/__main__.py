"""Allows `python -m rootnote` to start the API server."""

from rootnote.main import run

if __name__ == "__main__":
    run()
