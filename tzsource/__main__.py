"""
Main entry point for `tzsource` command-line utility.

This is to enable `python -m tzsource` if that is needed for any reason,
normal use should be to use the `tzsource` command-line tool directly.
"""

from tzsource.cli import main

main()
