"""
Entry point for running the step calculator as a module.

Usage:
    python -m src.scheduling preview --steps "1,10"
    python -m src.scheduling simulate good good
    python -m src.scheduling --help
"""
from .cli import main

if __name__ == "__main__":
    main()
