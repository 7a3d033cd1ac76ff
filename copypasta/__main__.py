"""Allow ``python -m copypasta``."""

from .cli import main

if __name__ == "__main__":
    main()
