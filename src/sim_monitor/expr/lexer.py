"""Table-driven tokenizer and unary operator disambiguation."""

import logging

from ..errors import LexError
from .rules import (TokenKind, Token, OPERAND_KINDS, LEVEL_DEREF,
                    LEVEL_NEGATE, compiled_rules)

log = logging.getLogger(__name__)


# ── Tokenizer ────────────────────────────────────────────────────────

def tokenize(text, rules=None):
    """Split *text* into a fresh token list.

    Args:
        text: Expression string.
        rules: Compiled rule table (default: the process-wide table).

    Returns:
        list of :class:`Token`. Whitespace is matched and dropped.

    Raises:
        LexError if no rule matches at some position.
    """
    if rules is None:
        rules = compiled_rules()
    tokens = []
    pos = 0
    n = len(text)
    while pos < n:
        for i, (regex, kind) in enumerate(rules):
            m = regex.match(text, pos)
            if m is None or m.end() == pos:
                continue
            lexeme = m.group()
            log.debug('match rules[%d] = "%s" at position %d with len %d: %s',
                      i, regex.pattern, pos, len(lexeme), lexeme)
            pos = m.end()
            if kind is not None:
                text_part = lexeme if kind in OPERAND_KINDS else ''
                tokens.append(Token(kind, text_part))
            break
        else:
            raise LexError(pos, text)
    return tokens


# ── Unary disambiguation ─────────────────────────────────────────────

# Tokens after which an operand is expected, so '-' and '*' are prefix.
UNARY_CONTEXT = frozenset({
    TokenKind.LPAREN, TokenKind.PLUS, TokenKind.MINUS, TokenKind.STAR,
    TokenKind.SLASH, TokenKind.NEGATE, TokenKind.DEREF,
    TokenKind.EQ, TokenKind.NEQ, TokenKind.AND, TokenKind.OR,
})


def mark_unary(tokens):
    """Rewrite leading / operator-following '*' and '-' as DEREF / NEGATE.

    Single left-to-right pass over *tokens*, modified in place. A token is
    judged by its already-rewritten predecessor, so ``--1`` yields two
    NEGATE tokens.
    """
    for i, tok in enumerate(tokens):
        if i > 0 and tokens[i - 1].kind not in UNARY_CONTEXT:
            continue
        if tok.kind == TokenKind.STAR:
            tok.kind = TokenKind.DEREF
            tok.level = LEVEL_DEREF
        elif tok.kind == TokenKind.MINUS:
            tok.kind = TokenKind.NEGATE
            tok.level = LEVEL_NEGATE
    return tokens


_SOURCE_SYMBOL = {
    TokenKind.NEGATE: '-',
    TokenKind.DEREF: '*',
}


def detokenize(tokens):
    """Render tokens back to source text that :func:`tokenize` accepts."""
    parts = []
    for tok in tokens:
        if tok.kind in OPERAND_KINDS:
            parts.append(tok.text)
        else:
            parts.append(_SOURCE_SYMBOL.get(tok.kind, tok.kind.value))
    return ' '.join(parts)
