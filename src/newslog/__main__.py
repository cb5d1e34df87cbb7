"""Allow running newslog as ``python -m newslog``."""

from newslog.client.cli import main

if __name__ == "__main__":
    main()
