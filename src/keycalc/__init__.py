'''
Infix calculator engine, fed one key at a time.

What sits behind a pocket calculator's keypad: digits, decimal point, the
four operators, parentheses, percent, backspace, clear and equals, one press
at a time. Operator precedence and nested parentheses are honoured as the
keys come in, not by parsing a finished expression. Arithmetic is Decimal:
exact, except for division and percent, which round half-up to a fixed
number of fractional digits.

Why not just eval() the expression?

- The display has to be right after every key, including the half-typed
  number ("5." before the next digit).
- Backspace edits the number being typed, not a string.
- Errors (division by zero, "()", unbalanced parentheses) halt the machine
  until cleared, like the real thing; they're never raised at the caller.
'''

from .cli import CLI
from .lexer import Lexer
from .machine import Machine, Mode
from .util import CalcError, ErrorKind, Operator, Paren


__all__ = ('Machine', 'Mode', 'Lexer', 'CLI',
           'CalcError', 'ErrorKind', 'Operator', 'Paren')
