from decimal import Decimal
import logging

from .util import ErrorKind, wrap_math_errors


logger = logging.getLogger(__name__)


class Literal:
    '''
    The number being typed, one key at a time.

    Kept as digit strings rather than a Decimal so that editing never has to
    reparse its own output: "1.0" stays "1.0" while typed, and backspacing
    "12.3" goes through "12." rather than straight to "12".
    '''

    DEFAULT_MAX_DIGITS = 16

    def __init__(self, max_digits=None):
        '''
        Create the zero literal.

        :param max_digits: Digits (sign and point excluded) past which further
                           digits are dropped.
        '''
        self.max_digits = type(self).DEFAULT_MAX_DIGITS if max_digits is None \
            else max_digits
        self.reset()

    def reset(self):
        '''
        Back to "0", no decimal point.
        '''
        self.integral = '0'
        self.fractional = ''
        self.point = False

    @property
    def pending_decimal(self):
        '''
        Point typed, but no digit after it yet.
        '''
        return self.point and not self.fractional

    def ndigits(self):
        return len(self.integral) + len(self.fractional)

    def full(self):
        return self.ndigits() >= self.max_digits

    def digit(self, d):
        '''
        Append a digit, replacing a lone leading zero.

        Return False if dropped for being past the digit limit.
        '''
        if self.full():
            logger.debug('Max digits reached, dropping %s', d)
            return False
        if self.point:
            self.fractional += d
        elif self.integral == '0':
            self.integral = d
        else:
            self.integral += d
        return True

    def decimal_point(self):
        '''
        Add the decimal point, unless there already is one.
        '''
        if self.point:
            logger.debug('Decimal point already there')
            return False
        if self.full():
            logger.debug('Max digits reached, dropping decimal point')
            return False
        self.point = True
        return True

    def backspace(self):
        '''
        Remove the pending point, or else the last digit.

        Removing the only fractional digit leaves the point pending; removing
        the only integral digit leaves "0".
        '''
        if self.pending_decimal:
            self.point = False
        elif self.fractional:
            self.fractional = self.fractional[:-1]
        else:
            self.integral = self.integral[:-1] or '0'

    @property
    @wrap_math_errors('Cannot convert {0}', ErrorKind.INVALID_NUMBER)
    def value(self):
        if self.fractional:
            return Decimal(self.integral + '.' + self.fractional)
        return Decimal(self.integral)

    def __str__(self):
        if self.point:
            return self.integral + '.' + self.fractional
        return self.integral

    def __repr__(self):
        return '{}({!r})'.format(type(self).__name__, str(self))
