"""Allow ``python -m smart_digest``."""

from smart_digest.cli.digest import main


if __name__ == "__main__":
    main()
