"""Debugger expression evaluator.

Evaluates one expression typed at the monitor console to an unsigned
32-bit value:

  - Decimal (``42``) and hex (``0x2a``) literals
  - Register references (``$eax``, ``$pc``)
  - Arithmetic: + - * /  (with parentheses), wrapping at 32 bits
  - Comparison ``==`` ``!=`` and boolean ``&&`` ``||`` (0 / 1)
  - Unary ``-`` (negate) and ``*`` (4-byte memory read)

Usage as library:
    from sim_monitor.expr import evaluate
    value, ok = evaluate('*($esp + 4)', machine.resolve_register,
                         machine.read_memory)
"""

import logging

from ..errors import ExprError, MemoryAccessError
from .lexer import tokenize, mark_unary, detokenize
from .evaluator import Evaluator, Balance, check_parentheses, find_dominant
from .rules import TokenKind, Token, RULES, compile_rules, compiled_rules

log = logging.getLogger(__name__)


def evaluate_expression(text, resolve_register, read_memory):
    """Evaluate *text*, raising on failure.

    Args:
        text: Expression string.
        resolve_register: ``name -> (value, ok)`` callable.
        read_memory: ``(address, width) -> value`` callable.

    Returns:
        int in ``0 .. 0xFFFFFFFF``.

    Raises:
        ExprError subclasses for bad input, MemoryAccessError when a
        dereference leaves simulated memory.
    """
    tokens = mark_unary(tokenize(text))
    if not tokens:
        raise ExprError("empty expression")
    evaluator = Evaluator(resolve_register, read_memory)
    try:
        return evaluator.eval_range(tokens, 0, len(tokens) - 1)
    except RecursionError:
        raise ExprError(f"expression too deep ({len(tokens)} tokens)") from None


def evaluate(text, resolve_register, read_memory):
    """Evaluate *text* to ``(value, ok)``.

    On failure ``ok`` is False and ``value`` is 0; the diagnostic is
    logged. Rule compilation errors and internal assertions still raise.
    """
    try:
        return evaluate_expression(text, resolve_register, read_memory), True
    except (ExprError, MemoryAccessError) as e:
        log.warning("%s", e)
        return 0, False


__all__ = [
    'evaluate', 'evaluate_expression', 'tokenize', 'mark_unary',
    'detokenize', 'Evaluator', 'Balance', 'check_parentheses',
    'find_dominant', 'TokenKind', 'Token', 'RULES', 'compile_rules',
    'compiled_rules',
]
