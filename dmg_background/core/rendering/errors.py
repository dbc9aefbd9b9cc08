"""
Generation Errors
=================

Exception hierarchy for background generation. Every error is terminal for the
run; the console entry point turns them into exit status 1.
"""

from typing import Optional, Sequence, Tuple


class BackgroundGenerationError(Exception):
    """Base exception for background generation failures."""

    pass


class ToolNotFoundError(BackgroundGenerationError):
    """Raised when no rasterization backend is installed."""

    def __init__(self, probed: Sequence[str]):
        self.probed = list(probed)
        super().__init__(
            "No rasterization tool available (tried: {})".format(", ".join(self.probed) or "none")
        )


# Name used by callers that think in terms of backend selection
NoBackendAvailable = ToolNotFoundError


class InvocationFailedError(BackgroundGenerationError):
    """Raised when a backend ran but failed or produced no output."""

    def __init__(
        self,
        message: str,
        command: Optional[Sequence[str]] = None,
        returncode: Optional[int] = None,
        stderr: str = "",
    ):
        self.command = list(command) if command else []
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(message)


class DimensionMismatchError(BackgroundGenerationError):
    """Raised when the output exists but has the wrong pixel size."""

    def __init__(self, expected: Tuple[int, int], actual: Tuple[int, int]):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Expected {expected[0]}x{expected[1]} but got {actual[0]}x{actual[1]}"
        )


class ImageReadError(BackgroundGenerationError):
    """Raised when an output file is missing or is not a readable image."""

    pass
