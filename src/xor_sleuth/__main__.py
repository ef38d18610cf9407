"""Allows ``python -m xor_sleuth`` with the same name and options as the installed script."""
from xor_sleuth.cli import cli

if __name__ == "__main__":
    cli(prog_name="xor-sleuth")
