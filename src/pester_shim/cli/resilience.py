"""Interrupt handling for CLI commands."""

import sys
from functools import wraps
from typing import Any, Callable, TypeVar

T = TypeVar("T")


def handle_keyboard_interrupt(func: Callable[..., T]) -> Callable[..., T]:
    """Decorator to gracefully handle Ctrl+C in CLI commands.

    Catches KeyboardInterrupt and exits with the conventional code, so an
    interrupted run does not end in a traceback.
    """

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> T:
        try:
            return func(*args, **kwargs)
        except KeyboardInterrupt:
            # Exit with 130 (128 + SIGINT signal number 2)
            sys.exit(130)

    return wrapper
