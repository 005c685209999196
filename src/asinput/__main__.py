"""Run the asinput command line: python -m asinput."""

from asinput.cli import main_entry

if __name__ == "__main__":
    main_entry()
