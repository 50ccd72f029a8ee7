"""Entrypoint for `python -m drilldown`."""

from .cli import main


if __name__ == "__main__":
    main()
