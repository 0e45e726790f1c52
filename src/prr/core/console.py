"""Console output utilities with colored prefixes.

Prefixes:
- [prr HH:MM:SS] cyan - progress messages from the merge workflow
"""

from datetime import datetime

# ANSI color codes
CYAN = "\033[36m"
GREEN = "\033[32m"
YELLOW = "\033[33m"
BOLD = "\033[1m"
DIM = "\033[2m"
RESET = "\033[0m"


def _prefix() -> str:
    """Generate prefix [prr] with timestamp."""
    timestamp = datetime.now().strftime("%H:%M:%S")
    return f"{CYAN}{BOLD}[prr {timestamp}]{RESET}"


def info(message: str, *, end: str = "\n", flush: bool = False) -> None:
    """Print info message with prefix."""
    print(f"{_prefix()} {message}", end=end, flush=flush)


def success(message: str, *, end: str = "\n", flush: bool = False) -> None:
    """Print success message with prefix (green)."""
    print(f"{_prefix()} {GREEN}{message}{RESET}", end=end, flush=flush)


def warning(message: str, *, end: str = "\n", flush: bool = False) -> None:
    """Print warning message with prefix (yellow)."""
    print(f"{_prefix()} {YELLOW}{message}{RESET}", end=end, flush=flush)


def detail(message: str, *, end: str = "\n", flush: bool = False) -> None:
    """Print detail/secondary message with prefix (dim)."""
    print(f"{_prefix()} {DIM}   {message}{RESET}", end=end, flush=flush)
