from enum import Enum
from functools import wraps
import decimal


class ErrorKind(Enum):
    UNBALANCED_BRACKETS = 'Unbalanced brackets'
    INSUFFICIENT_OPERANDS = 'Insufficient operands'
    DIVISION_BY_ZERO = 'Division by zero'
    DOMAIN = 'Invalid input'
    UNKNOWN_TOKEN = 'Unknown token'
    INVALID_TOKEN = 'Invalid token'
    SYNTAX = 'Wrong syntax'
    OVERFLOW = 'Result too large'
    STATE = 'Unreadable state'


class CalcError(Exception):
    '''
    Root of every calculator failure.

    The message is whatever the raiser said; kind says what went wrong.
    '''
    kind = None

    def __init__(self, detail=None):
        message = self.kind.value
        if detail is not None:
            message = '{} [{}]'.format(message, detail)
        super().__init__(message)
        self.detail = detail

    @property
    def message(self):
        return self.args[0]


class UnbalancedBracketsError(CalcError):
    kind = ErrorKind.UNBALANCED_BRACKETS


class InsufficientOperandsError(CalcError):
    kind = ErrorKind.INSUFFICIENT_OPERANDS


class DivisionByZeroError(CalcError):
    kind = ErrorKind.DIVISION_BY_ZERO


class DomainError(CalcError):
    kind = ErrorKind.DOMAIN


class UnknownTokenError(CalcError):
    kind = ErrorKind.UNKNOWN_TOKEN


class InvalidTokenError(CalcError):
    kind = ErrorKind.INVALID_TOKEN


class FormulaSyntaxError(CalcError):
    kind = ErrorKind.SYNTAX


class ResultOverflowError(CalcError):
    kind = ErrorKind.OVERFLOW


class StateError(CalcError):
    kind = ErrorKind.STATE


def wrap_user_errors(detail):
    '''
    Ugly hack decorator that converts arithmetic exceptions to CalcErrors.

    Passes through CalcErrors. detail is formatted with the call arguments.
    '''
    def decorator(f):
        @wraps(f)
        def wrapper(*args, **kwargs):
            try:
                return f(*args, **kwargs)
            except CalcError:
                raise
            except (OverflowError, decimal.Overflow, MemoryError) as e:
                raise ResultOverflowError(detail.format(*args, **kwargs)) from e
            except ZeroDivisionError as e:
                # decimal.DivisionByZero is one too
                raise DivisionByZeroError(detail.format(*args, **kwargs)) from e
            except (ArithmeticError, ValueError) as e:
                raise DomainError(detail.format(*args, **kwargs)) from e
        return wrapper
    return decorator
