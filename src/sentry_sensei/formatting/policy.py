"""Truncation policy shared by the response formatters."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Caps:
    """Size limits applied to one formatting mode."""

    description_chars: int
    comment_count: int
    comment_chars: int
    stack_frames: int
    tag_values: int


@dataclass(frozen=True)
class FormatPolicy:
    """Standard and deep-details caps.

    Deep caps are expected to be at least as large as standard caps.
    """

    standard: Caps = field(
        default_factory=lambda: Caps(
            description_chars=500,
            comment_count=3,
            comment_chars=300,
            stack_frames=10,
            tag_values=3,
        )
    )
    deep: Caps = field(
        default_factory=lambda: Caps(
            description_chars=1000,
            comment_count=10,
            comment_chars=1000,
            stack_frames=30,
            tag_values=10,
        )
    )

    def caps(self, deep: bool) -> Caps:
        return self.deep if deep else self.standard


DEFAULT_POLICY = FormatPolicy()
