"""Allow ``python -m safecond``."""

from safecond.cli import main

if __name__ == "__main__":
    main()
