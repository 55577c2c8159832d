"""Token model and lexer rule table.

Rules are tried in table order and the first rule matching at the scan
position wins, so the order is part of the grammar: the hex literal rule
must come before the decimal one, which would otherwise take the leading
``0`` of ``0x10``.
"""

import enum
import re
import threading

from ..errors import RuleCompileError


# ── Token kinds & binding levels ─────────────────────────────────────

class TokenKind(enum.Enum):
    PLUS = '+'
    MINUS = '-'
    STAR = '*'
    SLASH = '/'
    LPAREN = '('
    RPAREN = ')'
    EQ = '=='
    NEQ = '!='
    AND = '&&'
    OR = '||'
    NUMBER = 'number'
    REGISTER = 'register'
    NEGATE = 'neg'          # unary '-', set by mark_unary()
    DEREF = 'deref'         # unary '*', set by mark_unary()


# Larger level = looser binding = closer to the root of the expression.
LEVEL_OPERAND = 0
LEVEL_PAREN = 10
LEVEL_NEGATE = 21
LEVEL_DEREF = 22
LEVEL_MUL = 30
LEVEL_ADD = 40
LEVEL_EQ = 70
LEVEL_AND = 110
LEVEL_OR = 120

BINDING_LEVELS = {
    TokenKind.NUMBER: LEVEL_OPERAND,
    TokenKind.REGISTER: LEVEL_OPERAND,
    TokenKind.LPAREN: LEVEL_PAREN,
    TokenKind.RPAREN: LEVEL_PAREN,
    TokenKind.NEGATE: LEVEL_NEGATE,
    TokenKind.DEREF: LEVEL_DEREF,
    TokenKind.STAR: LEVEL_MUL,
    TokenKind.SLASH: LEVEL_MUL,
    TokenKind.PLUS: LEVEL_ADD,
    TokenKind.MINUS: LEVEL_ADD,
    TokenKind.EQ: LEVEL_EQ,
    TokenKind.NEQ: LEVEL_EQ,
    TokenKind.AND: LEVEL_AND,
    TokenKind.OR: LEVEL_OR,
}

UNARY_KINDS = frozenset({TokenKind.NEGATE, TokenKind.DEREF})
OPERAND_KINDS = frozenset({TokenKind.NUMBER, TokenKind.REGISTER})
PAREN_KINDS = frozenset({TokenKind.LPAREN, TokenKind.RPAREN})


class Token:
    """One lexeme.

    ``text`` is only filled for NUMBER and REGISTER tokens (register text
    keeps its ``$`` sigil). ``kind`` and ``level`` are rewritten in place
    when a ``-``/``*`` turns out to be unary.
    """
    __slots__ = ('kind', 'text', 'level')

    def __init__(self, kind, text=''):
        self.kind = kind
        self.text = text
        self.level = BINDING_LEVELS[kind]

    @property
    def is_operator(self):
        return self.kind not in OPERAND_KINDS and self.kind not in PAREN_KINDS

    def __eq__(self, other):
        if not isinstance(other, Token):
            return NotImplemented
        return (self.kind, self.text, self.level) == (other.kind, other.text, other.level)

    def __repr__(self):
        if self.text:
            return f"Token({self.kind.name}, {self.text!r})"
        return f"Token({self.kind.name})"


# ── Rule table ───────────────────────────────────────────────────────

class Rule:
    """Immutable (pattern, kind) pair. ``kind=None`` discards the match."""
    __slots__ = ('pattern', 'kind')

    def __init__(self, pattern, kind):
        object.__setattr__(self, 'pattern', pattern)
        object.__setattr__(self, 'kind', kind)

    def __setattr__(self, name, value):
        raise AttributeError("Rule is immutable")

    def __repr__(self):
        kind = self.kind.name if self.kind else 'SKIP'
        return f"Rule({self.pattern!r}, {kind})"


RULES = (
    Rule(r'\s+', None),                      # spaces
    Rule(r'\+', TokenKind.PLUS),
    Rule(r'-', TokenKind.MINUS),
    Rule(r'\*', TokenKind.STAR),
    Rule(r'/', TokenKind.SLASH),
    Rule(r'\(', TokenKind.LPAREN),
    Rule(r'\)', TokenKind.RPAREN),
    Rule(r'\$[a-zA-Z0-9]+', TokenKind.REGISTER),
    Rule(r'0[xX][0-9a-fA-F]+', TokenKind.NUMBER),   # hex
    Rule(r'0|[1-9][0-9]*', TokenKind.NUMBER),
    Rule(r'!=', TokenKind.NEQ),
    Rule(r'&&', TokenKind.AND),
    Rule(r'\|\|', TokenKind.OR),
    Rule(r'==', TokenKind.EQ),
)


def compile_rules(rules=RULES):
    """Compile a rule table.

    Args:
        rules: Sequence of :class:`Rule`, in priority order.

    Returns:
        list of (compiled_pattern, kind) tuples, same order.

    Raises:
        RuleCompileError naming the offending pattern.
    """
    compiled = []
    for rule in rules:
        try:
            compiled.append((re.compile(rule.pattern), rule.kind))
        except re.error as e:
            raise RuleCompileError(rule.pattern, e) from e
    return compiled


_compiled = None
_compile_lock = threading.Lock()


def compiled_rules():
    """Return the process-wide compiled rule table, compiling it once."""
    global _compiled
    if _compiled is None:
        with _compile_lock:
            if _compiled is None:
                _compiled = compile_rules(RULES)
    return _compiled
