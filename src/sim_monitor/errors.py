"""Error types for sim-monitor."""


class SimMonitorError(Exception):
    """Base error for sim-monitor."""
    pass


class RuleCompileError(SimMonitorError):
    """A lexer rule failed to compile (programming error, never recovered)."""

    def __init__(self, pattern, reason):
        self.pattern = pattern
        super().__init__(f"regex compilation failed: {reason}\n{pattern}")


class ExprError(SimMonitorError):
    """Expression could not be evaluated."""
    pass


class LexError(ExprError):
    """No lexer rule matches at some position of the input."""

    def __init__(self, position, text):
        self.position = position
        self.text = text
        super().__init__(
            f"no match at position {position}: {text[position:]!r}\n"
            f"{text}\n{' ' * position}^")


class ParenthesisError(ExprError):
    """Unbalanced parentheses inside a token range."""

    def __init__(self, p, q):
        self.p = p
        self.q = q
        super().__init__(f"bad expression: unbalanced parentheses in tokens {p}..{q}")


class LiteralError(ExprError):
    """Number literal does not parse as an unsigned 32-bit value."""
    pass


class RegisterError(ExprError):
    """Register name is unknown to the machine."""
    pass


class DivisionByZeroError(ExprError):
    """Right operand of '/' evaluated to zero."""
    pass


class MemoryAccessError(SimMonitorError):
    """Physical address outside simulated memory."""
    pass


class ImageLoadError(SimMonitorError):
    """Failed to read a binary image into memory."""
    pass
