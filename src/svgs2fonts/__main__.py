"""Allow ``python -m svgs2fonts``."""

from svgs2fonts.cli import cli

if __name__ == "__main__":
    cli()
