"""Configuration errors."""

from typing import List, Optional


class ConfigurationError(Exception):
    """The service cannot start with the given config file or environment.

    Carries every problem found, numbered, plus hints on fixing them, so an
    operator can correct the whole file in one pass.

    Attributes:
        message: One-line summary
        errors: Individual problems
        suggestions: Hints printed under the problems
    """

    def __init__(
        self,
        message: str,
        errors: Optional[List[str]] = None,
        suggestions: Optional[List[str]] = None,
    ):
        self.message = message
        self.errors = list(errors or [])
        self.suggestions = list(suggestions or [])
        super().__init__(self._render())

    def _render(self) -> str:
        lines = [self.message]
        if self.errors:
            lines += ["", "Validation Errors:"]
            lines += [f"  {number}. {error}" for number, error in enumerate(self.errors, 1)]
        if self.suggestions:
            lines += ["", "Suggestions:"]
            lines += [f"  - {suggestion}" for suggestion in self.suggestions]
        return "\n".join(lines)
