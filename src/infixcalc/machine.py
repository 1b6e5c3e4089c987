from decimal import Decimal
import decimal
import math

from .tokens import CONSTANTS, Operator, TokenKind
from .util import (DivisionByZeroError, DomainError, FormulaSyntaxError,
                   InsufficientOperandsError, InvalidTokenError,
                   ResultOverflowError, wrap_user_errors)


def exact_int(value):
    '''
    Return value as an int if it is exactly one, else None.

    Anything beyond 64 bits counts as not an int; callers fall back to
    floats for those.
    '''
    if not value.is_finite():
        return None
    if value.is_zero():
        return 0
    if value.adjusted() > 18 or value != value.to_integral_value():
        return None
    n = int(value)
    if not -2 ** 63 <= n < 2 ** 63:
        return None
    return n


def from_float(value):
    '''
    Convert a float result to Decimal, through its shortest repr.
    '''
    if math.isinf(value):
        raise ResultOverflowError(value)
    if math.isnan(value):
        raise DomainError(value)
    return Decimal(repr(value))


class Machine:
    '''
    Decimal stack machine, running RPN token sequences.

    Sums, differences and products are exact. Quotients, integral powers and
    logarithms are rounded to PRECISION digits. Everything trigonometric,
    square roots and fractional powers go through floats.
    '''

    PRECISION = 34
    MAX_FACTORIAL = 5000
    # Digits an exact sum may span; 5000! has 16326.
    MAX_DIGITS = 20000

    EXACT = decimal.Context(prec=decimal.MAX_PREC,
                            Emax=decimal.MAX_EMAX,
                            Emin=decimal.MIN_EMIN)
    WORKING = decimal.Context(prec=PRECISION,
                              rounding=decimal.ROUND_HALF_EVEN,
                              Emax=decimal.MAX_EMAX,
                              Emin=decimal.MIN_EMIN)

    def __init__(self, degrees=False):
        '''
        Create machine.

        :param degrees: Trigonometry in degrees rather than radians.
        '''
        self.degrees = degrees

    def run(self, tokens):
        '''
        Run RPN tokens and return the single Decimal left on the stack.
        '''
        stack = []
        for token in tokens:
            if token.kind is TokenKind.NUMBER:
                stack.append(self._number(token))
            elif token.kind is TokenKind.CONSTANT:
                stack.append(self._constant(token))
            elif token.kind is TokenKind.OPERATOR:
                handler = self._handler(type(self).BINARY, token)
                if len(stack) < 2:
                    raise InsufficientOperandsError(token)
                # Pushed left first, so popped right first.
                right = stack.pop()
                left = stack.pop()
                stack.append(handler(self, left, right))
            elif token.kind is TokenKind.FUNCTION:
                handler = self._handler(type(self).UNARY, token)
                if not stack:
                    raise InsufficientOperandsError(token)
                stack.append(handler(self, stack.pop()))
            else:
                raise InvalidTokenError(token)
        if len(stack) != 1:
            raise FormulaSyntaxError('{} values left'.format(len(stack)))
        return stack[0]

    @staticmethod
    def _handler(table, token):
        try:
            return table[token.operator]
        except (KeyError, ValueError) as e:
            raise InvalidTokenError(token) from e

    @staticmethod
    def _number(token):
        try:
            return Decimal(token.text)
        except decimal.InvalidOperation as e:
            raise InvalidTokenError(token) from e

    @staticmethod
    def _constant(token):
        negative = token.text.startswith('-')
        name = token.text[1:] if negative else token.text
        if name not in CONSTANTS:
            raise InvalidTokenError(token)
        value = from_float(CONSTANTS[name])
        return value.copy_negate() if negative else value

    def _to_radians(self, x):
        x = float(x)
        return x * math.pi / 180.0 if self.degrees else x

    def _from_radians(self, x):
        return x * (180.0 / math.pi) if self.degrees else x

    def _check_span(self, left, right, sign):
        '''
        Refuse exact sums that would need more than MAX_DIGITS digits.
        '''
        if not (left.is_finite() and right.is_finite()):
            return
        if left.is_zero() or right.is_zero():
            return
        top = max(left.adjusted(), right.adjusted())
        bottom = min(left.as_tuple().exponent, right.as_tuple().exponent)
        if top - bottom >= type(self).MAX_DIGITS:
            raise ResultOverflowError('{}{}{}'.format(left, sign, right))

    @wrap_user_errors('{1}+{2}')
    def add(self, left, right):
        self._check_span(left, right, '+')
        return type(self).EXACT.add(left, right)

    @wrap_user_errors('{1}-{2}')
    def subtract(self, left, right):
        self._check_span(left, right, '-')
        return type(self).EXACT.subtract(left, right)

    @wrap_user_errors('{1}×{2}')
    def multiply(self, left, right):
        return type(self).EXACT.multiply(left, right)

    @wrap_user_errors('{1}÷{2}')
    def divide(self, left, right):
        if right.is_zero():
            raise DivisionByZeroError('{}÷{}'.format(left, right))
        return type(self).WORKING.divide(left, right)

    @wrap_user_errors('{1}^{2}')
    def power(self, base, exponent):
        '''
        Exact-ish for integral exponents, floats for everything else.
        '''
        n = exact_int(exponent)
        if n == 0:
            return Decimal(1)
        if base.is_zero() and exponent < 0:
            # decimal would happily say Infinity
            raise DivisionByZeroError('{}^{}'.format(base, exponent))
        if n is not None:
            return type(self).WORKING.power(base, n)
        if base < 0:
            raise DomainError('{}^{}'.format(base, exponent))
        return from_float(float(base) ** float(exponent))

    @wrap_user_errors('sin {1}')
    def sin(self, x):
        return from_float(math.sin(self._to_radians(x)))

    @wrap_user_errors('cos {1}')
    def cos(self, x):
        return from_float(math.cos(self._to_radians(x)))

    @wrap_user_errors('tan {1}')
    def tan(self, x):
        return from_float(math.tan(self._to_radians(x)))

    @wrap_user_errors('sin⁻¹ {1}')
    def arcsin(self, x):
        if x.copy_abs() > 1:
            raise DomainError('sin⁻¹ {}'.format(x))
        return from_float(self._from_radians(math.asin(float(x))))

    @wrap_user_errors('cos⁻¹ {1}')
    def arccos(self, x):
        if x.copy_abs() > 1:
            raise DomainError('cos⁻¹ {}'.format(x))
        return from_float(self._from_radians(math.acos(float(x))))

    @wrap_user_errors('tan⁻¹ {1}')
    def arctan(self, x):
        return from_float(self._from_radians(math.atan(float(x))))

    @wrap_user_errors('log {1}')
    def log(self, x):
        if x <= 0:
            raise DomainError('log {}'.format(x))
        return type(self).WORKING.log10(x)

    @wrap_user_errors('ln {1}')
    def ln(self, x):
        if x <= 0:
            raise DomainError('ln {}'.format(x))
        return type(self).WORKING.ln(x)

    @wrap_user_errors('√{1}')
    def root(self, x):
        if x < 0:
            raise DomainError('√{}'.format(x))
        return from_float(math.sqrt(float(x)))

    def factorial(self, x):
        n = exact_int(x)
        if n is None or n < 0:
            raise DomainError('{}!'.format(x))
        if n > type(self).MAX_FACTORIAL:
            raise ResultOverflowError('{}!'.format(x))
        return Decimal(math.factorial(n))

    BINARY = {
        Operator.PLUS: add,
        Operator.MINUS: subtract,
        Operator.MULTIPLY: multiply,
        Operator.DIVIDE: divide,
        Operator.POWER: power,
    }

    UNARY = {
        Operator.SIN: sin,
        Operator.COS: cos,
        Operator.TAN: tan,
        Operator.ARCSIN: arcsin,
        Operator.ARCCOS: arccos,
        Operator.ARCTAN: arctan,
        Operator.LOG: log,
        Operator.LN: ln,
        Operator.ROOT: root,
        Operator.FACTORIAL: factorial,
    }
