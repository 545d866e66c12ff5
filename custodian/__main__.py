"""Allow running custodian as ``python -m custodian``."""

from custodian.cli.main import main

if __name__ == "__main__":
    main()
