"""Allow ``python -m netpath``."""

from netpath.cli import main

if __name__ == "__main__":
    main()
