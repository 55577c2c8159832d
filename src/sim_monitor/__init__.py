"""sim-monitor: Expression evaluator for an instruction-set simulator's debugger.

Supports:
  - Decimal and 0x-hex literals, $-prefixed register references
  - + - * / with C precedence and left associativity, wrapping at 32 bits
  - == != && || yielding 0 / 1
  - Unary - (negate) and * (4-byte little-endian memory read)
  - Interactive monitor console (p, x, info r) over a simulated machine

Architecture:
  Regex rule table drives a tokenizer; '-' and '*' are then reclassified
  as unary where no operand precedes them; a recursive evaluator splits
  each token range at its loosest-binding operator.
"""

__version__ = '1.0.0'
