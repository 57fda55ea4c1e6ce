"""Entry point for ``python -m skan``."""

from .cli import main

if __name__ == "__main__":
    main()
