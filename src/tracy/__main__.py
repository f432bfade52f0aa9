"""Allow ``python -m tracy``."""

from tracy.cli.main import main

if __name__ == "__main__":
    main()
