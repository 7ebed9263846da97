from decimal import (Decimal, Context, MAX_PREC, ROUND_DOWN, ROUND_HALF_UP,
                     DivisionByZero, InvalidOperation, Overflow)
from collections import deque
from functools import wraps
from enum import Enum
import logging

from .util import CalcError, ErrorKind, Operator, Paren, wrap_math_errors
from .literal import Literal


logger = logging.getLogger(__name__)

# What the last accepted event left behind, when not entering digits.
OPERATOR = 'operator'  # an operator, awaiting its right operand
OPERAND = 'operand'  # a closed group, complete on top of the value stack
RESULT = 'result'    # a result on display, not yet on the value stack


class Mode(Enum):
    IDLE = 'idle'
    ENTERING_DIGITS = 'entering digits'
    ERROR = 'error'


def _event(recovers=False):
    '''
    Decorator for input events.

    In error state, the event is dropped, unless it recovers, in which case
    the machine is cleared first. CalcErrors put the machine in error state.
    Return the display either way.
    '''
    def decorator(f):
        @wraps(f)
        def wrapper(self, *args, **kwargs):
            if self.error is not None:
                if not recovers:
                    logger.debug('%s ignored (in error state)', f.__name__)
                    return self.display_value()
                self.clear()
            try:
                f(self, *args, **kwargs)
            except CalcError as e:
                self._halt(e)
            return self.display_value()
        return wrapper
    return decorator


class Machine:
    '''
    Infix calculator engine (the kind behind a pocket calculator's keypad).

    Fed one key at a time. Operands go on one stack, operators and open
    parentheses on another; an incoming operator first reduces everything
    on the operator stack of higher or equal precedence, down to the nearest
    open parenthesis.
    '''

    DEFAULT_MAX_DIGITS = Literal.DEFAULT_MAX_DIGITS
    # Fractional digits kept by division and percent
    DEFAULT_SCALE = 8

    PRECEDENCE = {
        Operator.ADD: 1,
        Operator.SUB: 1,
        Operator.MUL: 2,
        Operator.DIV: 2,
        Paren.OPEN: 0,
    }

    # Exact ones only; division rounds, see _divide.
    ARITHMETIC = {
        Operator.ADD: Context.add,
        Operator.SUB: Context.subtract,
        Operator.MUL: Context.multiply,
    }

    # ASCII spellings
    ALIASES = {
        '*': Operator.MUL,
        'x': Operator.MUL,
        '/': Operator.DIV,
    }

    def __init__(self, max_digits=None, scale=None):
        '''
        Create cleared machine.

        :param max_digits: Longest number that can be typed.
        :param scale: Fractional digits kept by division and percent, rounded
                      half-up.
        '''
        self.max_digits = type(self).DEFAULT_MAX_DIGITS if max_digits is None \
            else max_digits
        self.scale = type(self).DEFAULT_SCALE if scale is None else scale
        if self.max_digits < 1:
            raise ValueError('Bad max digits {}'.format(self.max_digits))
        if self.scale < 0:
            raise ValueError('Bad scale {}'.format(self.scale))
        # Exact addition, subtraction and multiplication; only division and
        # percent ever round.
        self.context = Context(prec=MAX_PREC,
                               rounding=ROUND_HALF_UP,
                               traps=[InvalidOperation,
                                      DivisionByZero,
                                      Overflow])
        self.quantum = Decimal(1).scaleb(-self.scale)
        self.literal = Literal(self.max_digits)
        self.values = deque()
        self.operators = deque()
        self.clear()

    def clear(self):
        '''
        Back to "0", nothing pending, no error.
        '''
        self.literal.reset()
        self.entering_digits = False
        self.values.clear()
        self.operators.clear()
        self.current = Decimal(0)
        self.error = None
        self._depth = 0
        self._last = None
        logger.debug('Cleared')
        return self.display_value()

    @_event(recovers=True)
    def input_digit(self, d):
        '''
        Type a digit, starting a new number if not already typing one.
        '''
        d = str(d)
        if len(d) != 1 or d not in '0123456789':
            raise ValueError('Not a digit: {!r}'.format(d))
        if not self.entering_digits:
            self._start_literal()
        if self.literal.digit(d):
            self.current = self.literal.value

    @_event(recovers=True)
    def input_decimal_point(self):
        '''
        Type the decimal point; "0." if not typing a number yet.
        '''
        if not self.entering_digits:
            self._start_literal()
        self.literal.decimal_point()

    @_event()
    def input_operator(self, op):
        '''
        Press a binary operator. Pressing one right after another replaces it.
        '''
        self._push_operator(self._operator(op))

    @_event()
    def input_paren(self, kind):
        if kind == Paren.OPEN:
            self._open()
        elif kind == Paren.CLOSE:
            self._close()
        else:
            raise ValueError('Not a parenthesis: {!r}'.format(kind))

    @_event()
    def equals(self):
        '''
        Reduce everything; the result stays on display and can be chained.
        '''
        committed = self._commit()
        if self._depth:
            raise CalcError('Unclosed parenthesis',
                            ErrorKind.MISMATCHED_PAREN)
        if not committed and self._last == OPERATOR:
            raise CalcError('Missing operand before =',
                            ErrorKind.SYNTAX_ERROR)
        while self.operators:
            if self.operators[-1] == Paren.OPEN:
                raise CalcError('Unmatched open parenthesis',
                                ErrorKind.MISMATCHED_PAREN)
            self._reduce()
        if len(self.values) == 1:
            self.current = self.values.pop()
            self._last = RESULT
            logger.debug('Result %s', self.format(self.current))
        elif self.values:
            raise CalcError('{} operands left over'.format(len(self.values)),
                            ErrorKind.SYNTAX_ERROR)
        else:
            logger.debug('Equals on empty state')

    @_event()
    def percent(self):
        '''
        Divide the operand at hand by 100.

        That's the number being typed, else the result on display, else the
        top of the value stack. Never "percent of the previous addend".
        '''
        if self.entering_digits:
            self.current = self._percent_of(self.literal.value)
            self.entering_digits = False
            self._last = RESULT
        elif self._last == RESULT:
            self.current = self._percent_of(self.current)
        elif self.values:
            self.current = self.values[-1] = self._percent_of(self.values[-1])
        else:
            logger.debug('Percentage ignored (no operand available)')
            return
        logger.debug('Applied %% giving %s', self.format(self.current))

    @_event()
    def backspace(self):
        '''
        Delete the last key of the number being typed.

        Committed operators and operands can't be taken back.
        '''
        if not self.entering_digits:
            logger.debug('Backspace ignored (nothing to delete)')
            return
        self.literal.backspace()
        self.current = self.literal.value

    def feed(self, event, *args):
        '''
        Run named input event, e.g. feed('digit', '7').
        '''
        try:
            f = type(self).EVENTS[event]
        except KeyError:
            raise ValueError('No such event {!r}'.format(event)) from None
        return f(self, *args)

    def display_value(self):
        '''
        What the calculator's display shows.
        '''
        if self.error is not None:
            return 'Error'
        if self.entering_digits:
            return str(self.literal)
        return self.format(self.current)

    def expression_preview(self):
        '''
        The pending expression, as far as the stacks remember it.

        Reduced parts show as their value, so "2 × 3 +" reads "6 +".
        '''
        if self.error is not None:
            return ''
        values = iter(self.values)
        tokens = []
        for op in self.operators:
            if op != Paren.OPEN:
                tokens.append(self.format(next(values)))
            tokens.append(op.value)
        tokens.extend(map(self.format, values))
        if self.entering_digits:
            tokens.append(str(self.literal))
        elif self._last == RESULT and self.operators:
            tokens.append(self.format(self.current))
        return ' '.join(tokens)

    def format(self, value):
        '''
        Plain notation, no trailing zeros, no negative zero.
        '''
        if value.is_zero():
            return '0'
        return '{:f}'.format(value.normalize(self.context))

    def is_entering_digits(self):
        return self.entering_digits

    def is_error(self):
        return self.error is not None

    @property
    def paren_depth(self):
        '''
        Open parentheses not yet closed.
        '''
        return self._depth

    @property
    def mode(self):
        if self.error is not None:
            return Mode.ERROR
        if self.entering_digits:
            return Mode.ENTERING_DIGITS
        return Mode.IDLE

    def _operator(self, op):
        try:
            return Operator(type(self).ALIASES.get(op, op))
        except ValueError:
            raise ValueError('Not an operator: {!r}'.format(op)) from None

    def _start_literal(self):
        # ")5" means ")×5"
        if self._last == OPERAND:
            self._push_operator(Operator.MUL)
        self.literal.reset()
        self.entering_digits = True
        self.current = Decimal(0)
        self._last = None

    def _commit(self):
        '''
        Push the operand being typed, or the result on display.

        Return False if there was neither.
        '''
        if self.entering_digits:
            value = self.literal.value
            self.entering_digits = False
        elif self._last == RESULT:
            value = self.current
        else:
            return False
        self.values.append(value)
        self.current = value
        self._last = OPERAND
        logger.debug('Pushed %s', self.format(value))
        return True

    def _push_operator(self, op):
        if not self.entering_digits and self._last == OPERATOR:
            logger.debug('Replaced %s with %s',
                         self.operators[-1].value, op.value)
            self.operators[-1] = op
            return
        if not self._commit() and self._last in (None, Paren.OPEN):
            # Unary plus or minus: "-5" is "0 - 5"
            self.values.append(Decimal(0))
            logger.debug('Pushed 0 for unary %s', op.value)
        precedence = type(self).PRECEDENCE
        while (self.operators and
               self.operators[-1] != Paren.OPEN and
               precedence[self.operators[-1]] >= precedence[op]):
            self._reduce()
        self.operators.append(op)
        self._last = OPERATOR
        logger.debug('Pushed operator %s', op.value)

    def _open(self):
        # "5(" means "5×("
        if self.entering_digits or self._last == OPERAND:
            self._push_operator(Operator.MUL)
        elif self._last == RESULT:
            # Dropped, not multiplied
            self.current = Decimal(0)
        self.operators.append(Paren.OPEN)
        self._depth += 1
        self._last = Paren.OPEN
        logger.debug('Pushed open parenthesis, depth %d', self._depth)

    def _close(self):
        if not self._depth:
            raise CalcError('Closing parenthesis without matching open '
                            'parenthesis', ErrorKind.MISMATCHED_PAREN)
        if not self._commit():
            if self._last == Paren.OPEN:
                raise CalcError('Empty parentheses', ErrorKind.EMPTY_PAREN)
            if self._last == OPERATOR:
                raise CalcError('Missing operand before )',
                                ErrorKind.SYNTAX_ERROR)
        while self.operators and self.operators[-1] != Paren.OPEN:
            self._reduce()
        if not self.operators or not self.values:
            raise CalcError('Open parenthesis expected but not found',
                            ErrorKind.INTERNAL_ERROR)
        self.operators.pop()
        self._depth -= 1
        self.current = self.values[-1]
        self._last = OPERAND
        logger.debug('Closed parenthesis, depth %d', self._depth)

    def _reduce(self):
        '''
        Pop an operator and its two operands, push the result.
        '''
        if len(self.values) < 2 or not self.operators:
            raise CalcError('Less than 2 operands for {}'.format(
                                self.operators[-1].value
                                if self.operators else 'nothing'),
                            ErrorKind.SYNTAX_ERROR)
        op = self.operators.pop()
        # Right first; stack order.
        right = self.values.pop()
        left = self.values.pop()
        result = self._apply(op, left, right)
        logger.debug('Reduced %s %s %s to %s',
                     self.format(left), op.value, self.format(right),
                     self.format(result))
        self.values.append(result)
        self.current = result

    @wrap_math_errors('Cannot compute {2} {1} {3}')
    def _apply(self, op, left, right):
        if op == Operator.DIV:
            return self._divide(left, right)
        try:
            f = type(self).ARITHMETIC[op]
        except KeyError:
            raise CalcError('Unknown operator {!r}'.format(op),
                            ErrorKind.INTERNAL_ERROR) from None
        return f(self.context, left, right)

    @wrap_math_errors('Cannot divide {1} by {2}')
    def _divide(self, left, right):
        '''
        left ÷ right, rounded half-up to scale.
        '''
        if right.is_zero():
            raise CalcError('Division by zero', ErrorKind.DIVISION_BY_ZERO)
        # Truncate past the last kept digit, then round once.
        context = self.context.copy()
        context.rounding = ROUND_DOWN
        context.prec = max(left.adjusted() - right.adjusted() + 2, 1) + \
            self.scale + 1
        quotient = context.divide(left, right)
        return quotient.quantize(self.quantum,
                                 rounding=ROUND_HALF_UP,
                                 context=self.context)

    def _percent_of(self, value):
        return self._divide(value, Decimal(100))

    def _halt(self, e):
        kind = e.kind or ErrorKind.INTERNAL_ERROR
        logger.warning('%s: %s', kind.value, e)
        self.clear()
        self.error = kind

    # Event names to events, for feed().
    EVENTS = {
        'digit': input_digit,
        'point': input_decimal_point,
        'operator': input_operator,
        'paren': input_paren,
        'equals': equals,
        'percent': percent,
        'backspace': backspace,
        'clear': clear,
    }
