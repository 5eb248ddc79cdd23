"""Custom exceptions for configuration management."""

from typing import List, Optional


class ConfigurationError(Exception):
    """
    Raised when the YAML file or the environment holds invalid settings.

    Collects every validation problem found in one pass so the operator
    can fix them all at once, plus hints on how to fix them.
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
        super().__init__("\n".join(self.to_lines()))

    def to_lines(self) -> List[str]:
        """Render the message, numbered errors and suggestions as lines."""
        lines = [self.message]

        if self.errors:
            lines.append("")
            lines.append("Validation Errors:")
            lines.extend(f"  {i}. {error}" for i, error in enumerate(self.errors, 1))

        if self.suggestions:
            lines.append("")
            lines.append("Suggestions:")
            lines.extend(f"  - {suggestion}" for suggestion in self.suggestions)

        return lines
