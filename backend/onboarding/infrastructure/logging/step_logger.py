"""Colored step logger: ANSI-colored console logging for onboarding writes.

Color scheme:
    Green  : Wizard step
    Blue   : Relation reconciliation
    Magenta: Transactions
    Cyan   : Attachments
    Red    : Errors
    Gray   : Details / timing
"""

import logging
import time
from contextlib import contextmanager
from typing import Any


class _Colors:
    """ANSI escape codes for terminal colors."""

    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"

    RED = "\033[91m"
    GREEN = "\033[92m"
    BLUE = "\033[94m"
    MAGENTA = "\033[95m"
    CYAN = "\033[96m"
    GRAY = "\033[90m"


class StepStage:
    """Predefined stages with their label and color."""

    STEP = ("STEP", _Colors.GREEN)
    RECONCILE = ("RECONCILE", _Colors.BLUE)
    TRANSACTION = ("TXN", _Colors.MAGENTA)
    ATTACHMENT = ("ATTACH", _Colors.CYAN)
    ERROR = ("ERROR", _Colors.RED)


def _format_details(kwargs: dict[str, Any]) -> str:
    if not kwargs:
        return ""
    details = " | ".join(f"{k}={v}" for k, v in kwargs.items())
    return f" {_Colors.GRAY}({details}){_Colors.RESET}"


class StepLogger:
    """Color-coded logger shared by the onboarding services.

    Usage:
        log = StepLogger("onboarding.steps")
        with log.timed_step(StepStage.STEP, "location", client_id=42):
            await coordinator.run_atomic(ops)
    """

    def __init__(self, component_name: str):
        self._logger = logging.getLogger(component_name)

    def step_start(self, stage: tuple[str, str], message: str, **kwargs: Any) -> None:
        label, color = stage
        self._logger.info(
            f"{color}{_Colors.BOLD}[{label}]{_Colors.RESET} "
            f"{color}{message}{_Colors.RESET}{_format_details(kwargs)}"
        )

    def step_complete(self, stage: tuple[str, str], message: str, **kwargs: Any) -> None:
        label, color = stage
        self._logger.info(
            f"{color}[{label}]{_Colors.RESET} "
            f"{_Colors.GREEN}✓ {message}{_Colors.RESET}{_format_details(kwargs)}"
        )

    def step_error(self, stage: tuple[str, str], message: str, error: Exception | None = None) -> None:
        label, _ = stage
        formatted = (
            f"{_Colors.RED}{_Colors.BOLD}[{label}]{_Colors.RESET} "
            f"{_Colors.RED}{message}{_Colors.RESET}"
        )
        if error:
            formatted += f" {_Colors.DIM}→ {type(error).__name__}: {error}{_Colors.RESET}"
        self._logger.error(formatted)

    def detail(self, message: str, **kwargs: Any) -> None:
        """Log additional detail at DEBUG level."""
        self._logger.debug(
            f"   {_Colors.GRAY}├─ {message}{_Colors.RESET}{_format_details(kwargs)}"
        )

    @contextmanager
    def timed_step(self, stage: tuple[str, str], message: str, **kwargs: Any):
        """Log start and end of a block with elapsed time; errors are re-raised."""
        self.step_start(stage, message, **kwargs)
        start = time.perf_counter()
        try:
            yield
        except Exception as e:
            elapsed = time.perf_counter() - start
            self.step_error(stage, f"{message}: failed after {elapsed:.2f}s", error=e)
            raise
        else:
            elapsed = time.perf_counter() - start
            self.step_complete(stage, f"{message}: {elapsed:.2f}s", **kwargs)
