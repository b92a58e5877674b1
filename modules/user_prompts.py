"""Console output helpers for the command line runner.

Color-coded messages (success, error, info) and section headers.
colorama makes the ANSI codes work on Windows consoles as well. Status
messages go to stderr so stdout carries only results.
"""

from __future__ import annotations

import sys

import colorama

colorama.just_fix_windows_console()

DIVIDER_CHAR = "="
DIVIDER_LENGTH = 70


class Colors:
    """ANSI color codes for terminal output formatting."""
    HEADER = "\033[95m"
    OKCYAN = "\033[96m"
    BOLD = "\033[1m"
    ENDC = "\033[0m"
    INFO = "\033[0;36m"
    SUCCESS = "\033[1;32m"
    WARNING = "\033[93m"
    ERROR = "\033[1;31m"
    DIM = "\033[2;37m"


def print_header(message: str, subtitle: str = "") -> None:
    """Print a prominent header with an optional subtitle."""
    divider = DIVIDER_CHAR * DIVIDER_LENGTH
    print(f"\n{Colors.BOLD}{Colors.HEADER}{divider}{Colors.ENDC}", file=sys.stderr)
    print(f"{Colors.BOLD}{Colors.HEADER}  {message}{Colors.ENDC}", file=sys.stderr)
    if subtitle:
        print(f"{Colors.OKCYAN}  {subtitle}{Colors.ENDC}", file=sys.stderr)
    print(f"{Colors.BOLD}{Colors.HEADER}{divider}{Colors.ENDC}\n", file=sys.stderr)


def print_section(title: str) -> None:
    print(f"\n{Colors.BOLD}{title}{Colors.ENDC}", file=sys.stderr)
    print(f"{Colors.DIM}{'-' * len(title)}{Colors.ENDC}", file=sys.stderr)


def print_success(message: str) -> None:
    print(f"{Colors.SUCCESS}[OK] {message}{Colors.ENDC}", file=sys.stderr)


def print_info(message: str) -> None:
    print(f"{Colors.INFO}{message}{Colors.ENDC}", file=sys.stderr)


def print_error(message: str) -> None:
    print(f"{Colors.ERROR}[ERROR] {message}{Colors.ENDC}", file=sys.stderr)


__all__ = [
    "Colors",
    "print_header",
    "print_section",
    "print_success",
    "print_info",
    "print_error",
]
