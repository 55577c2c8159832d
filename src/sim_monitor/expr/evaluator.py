"""Recursive evaluator over a token range.

A range ``[p, q]`` is reduced by one of three moves: a lone operand is
looked up, a range wrapped in one outer pair of parentheses is unwrapped,
anything else is split at its dominant operator (loosest binding level at
parenthesis depth 0, rightmost on ties) and both halves are evaluated.
Taking the rightmost of equal binary operators makes ``1-2-3`` split as
``(1-2)-3``.
"""

import enum

from ..errors import (ExprError, ParenthesisError, LiteralError,
                      RegisterError, DivisionByZeroError)
from .rules import TokenKind, UNARY_KINDS

WORD_MASK = 0xFFFFFFFF


class Balance(enum.Enum):
    MALFORMED = 'malformed'
    WRAPPED = 'wrapped'
    NOT_WRAPPED = 'not wrapped'


# ── Parenthesis checks ───────────────────────────────────────────────

def check_parentheses(tokens, p, q):
    """Classify the parenthesis structure of ``tokens[p..q]``.

    Returns:
        Balance.MALFORMED for an empty range or unbalanced parentheses,
        Balance.WRAPPED when ``tokens[p]`` is '(' and its matching ')' is
        ``tokens[q]``, Balance.NOT_WRAPPED otherwise.
    """
    if p > q:
        return Balance.MALFORMED
    wrapped = tokens[p].kind == TokenKind.LPAREN and tokens[q].kind == TokenKind.RPAREN
    depth = 0
    for i in range(p, q + 1):
        kind = tokens[i].kind
        if kind == TokenKind.LPAREN:
            depth += 1
        elif kind == TokenKind.RPAREN:
            depth -= 1
            if depth < 0:
                return Balance.MALFORMED
            if depth == 0 and i < q:
                # outer '(' closed early: (1)+(2)
                wrapped = False
    if depth != 0:
        return Balance.MALFORMED
    return Balance.WRAPPED if wrapped else Balance.NOT_WRAPPED


def find_dominant(tokens, p, q):
    """Index of the operator that splits ``tokens[p..q]``, or None.

    Unary operators are prefix: when the loosest operator at depth 0 is
    unary, the split point is the first token of the range, which must
    itself be unary.
    """
    op = None
    depth = 0
    for i in range(p, q + 1):
        tok = tokens[i]
        if tok.kind == TokenKind.LPAREN:
            depth += 1
        elif tok.kind == TokenKind.RPAREN:
            depth -= 1
        elif depth == 0 and tok.is_operator:
            if op is None or tok.level >= tokens[op].level:
                op = i
    if op is not None and tokens[op].kind in UNARY_KINDS:
        return p if tokens[p].kind in UNARY_KINDS else None
    return op


def parse_number(text):
    """Parse a NUMBER lexeme as an unsigned 32-bit value."""
    try:
        if len(text) > 2 and text[1] in 'xX':
            value = int(text, 16)
        else:
            value = int(text, 10)
    except ValueError:
        raise LiteralError(f"bad number literal '{text}'") from None
    if value > WORD_MASK:
        raise LiteralError(f"number literal '{text}' does not fit in 32 bits")
    return value


# ── Evaluator ────────────────────────────────────────────────────────

class Evaluator:
    """Evaluate token ranges against a machine.

    Args:
        resolve_register: ``name -> (value, ok)``; name has no ``$`` sigil.
        read_memory: ``(address, width) -> value``.
    """

    def __init__(self, resolve_register, read_memory):
        self.resolve_register = resolve_register
        self.read_memory = read_memory

    def eval_range(self, tokens, p, q):
        """Value of ``tokens[p..q]`` as an unsigned 32-bit int.

        Raises:
            ExprError (or a subclass) on the first failure found.
        """
        if p > q:
            raise ExprError(f"bad expression: missing operand at token {p}")

        if p == q:
            return self._operand(tokens[p])

        balance = check_parentheses(tokens, p, q)
        if balance == Balance.WRAPPED:
            return self.eval_range(tokens, p + 1, q - 1)
        if balance == Balance.MALFORMED:
            raise ParenthesisError(p, q)

        op = find_dominant(tokens, p, q)
        if op is None:
            raise ExprError(f"bad expression: no operator in tokens {p}..{q}")
        kind = tokens[op].kind

        if kind in UNARY_KINDS:
            val = self.eval_range(tokens, op + 1, q)
            if kind == TokenKind.NEGATE:
                return -val & WORD_MASK
            return self.read_memory(val, 4) & WORD_MASK

        val1 = self.eval_range(tokens, p, op - 1)
        val2 = self.eval_range(tokens, op + 1, q)
        return _combine(kind, val1, val2)

    def _operand(self, tok):
        if tok.kind == TokenKind.NUMBER:
            return parse_number(tok.text)
        if tok.kind == TokenKind.REGISTER:
            name = tok.text[1:]
            value, ok = self.resolve_register(name)
            if not ok:
                raise RegisterError(f"unknown register '${name}'")
            return value & WORD_MASK
        raise ExprError(f"bad expression: unexpected '{tok.kind.value}'")


def _combine(kind, a, b):
    if kind == TokenKind.PLUS:
        return (a + b) & WORD_MASK
    if kind == TokenKind.MINUS:
        return (a - b) & WORD_MASK
    if kind == TokenKind.STAR:
        return (a * b) & WORD_MASK
    if kind == TokenKind.SLASH:
        if b == 0:
            raise DivisionByZeroError("division by zero")
        return a // b
    if kind == TokenKind.EQ:
        return int(a == b)
    if kind == TokenKind.NEQ:
        return int(a != b)
    if kind == TokenKind.AND:
        return int(bool(a) and bool(b))
    if kind == TokenKind.OR:
        return int(bool(a) or bool(b))
    raise AssertionError(f"unhandled operator {kind}")
