from enum import Enum
from functools import wraps
from decimal import DecimalException


class ErrorKind(Enum):
    '''
    Why the machine halted. Never shown on the display, which only says
    "Error"; kept for diagnostics.
    '''
    INVALID_NUMBER = 'invalid number'
    SYNTAX_ERROR = 'syntax error'
    MISMATCHED_PAREN = 'mismatched parenthesis'
    EMPTY_PAREN = 'empty parentheses'
    DIVISION_BY_ZERO = 'division by zero'
    MATH_ERROR = 'math error'
    INTERNAL_ERROR = 'internal error'


class CalcError(Exception):
    '''
    Anything that halts the machine, or that the lexer can't make sense of.

    :param kind: ErrorKind the machine records; None outside of the machine.
    '''
    def __init__(self, message, kind=None):
        super().__init__(message)
        self.kind = kind


def wrap_math_errors(fmt, kind=ErrorKind.MATH_ERROR):
    '''
    Ugly hack decorator that converts decimal exceptions to CalcErrors.

    Passes through CalcErrors.
    '''
    def decorator(f):
        @wraps(f)
        def wrapper(*args, **kwargs):
            try:
                return f(*args, **kwargs)
            except CalcError:
                raise
            except DecimalException as e:
                raise CalcError(fmt.format(*args, **kwargs), kind) from e
        return wrapper
    return decorator


class Operator(str, Enum):
    '''
    Binary operators, by their key symbol.
    '''
    ADD = '+'
    SUB = '-'
    MUL = '×'
    DIV = '÷'

    def __str__(self):
        return self.value


class Paren(str, Enum):
    OPEN = '('
    CLOSE = ')'

    def __str__(self):
        return self.value
