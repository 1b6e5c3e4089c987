'''
Lexical units shared by the lexer, the converter and the machine.
'''

from collections import namedtuple
from enum import Enum
import math


class TokenKind(Enum):
    NUMBER = 'number'
    OPERATOR = 'operator'
    FUNCTION = 'function'
    CONSTANT = 'constant'
    OPEN_BRACKET = 'open'
    CLOSE_BRACKET = 'close'


class Operator(Enum):
    '''
    Every operator and function, keyed by the symbol shown in a formula.
    '''
    PLUS = '+'
    MINUS = '-'
    MULTIPLY = '×'
    DIVIDE = '÷'
    POWER = '^'
    ROOT = '√'
    FACTORIAL = '!'
    SIN = 'sin'
    COS = 'cos'
    TAN = 'tan'
    ARCSIN = 'sin⁻¹'
    ARCCOS = 'cos⁻¹'
    ARCTAN = 'tan⁻¹'
    LOG = 'log'
    LN = 'ln'


OperatorSpec = namedtuple('OperatorSpec', 'precedence arity')

# Functions and factorial bind tightest, then power, products, sums.
FUNCTION_PRECEDENCE = 4

OPERATORS = {
    Operator.PLUS: OperatorSpec(1, 2),
    Operator.MINUS: OperatorSpec(1, 2),
    Operator.MULTIPLY: OperatorSpec(2, 2),
    Operator.DIVIDE: OperatorSpec(2, 2),
    Operator.POWER: OperatorSpec(3, 2),
}
for _function in (Operator.ROOT, Operator.FACTORIAL,
                  Operator.SIN, Operator.COS, Operator.TAN,
                  Operator.ARCSIN, Operator.ARCCOS, Operator.ARCTAN,
                  Operator.LOG, Operator.LN):
    OPERATORS[_function] = OperatorSpec(FUNCTION_PRECEDENCE, 1)
del _function

# Postfix functions follow their operand; every other function precedes it.
POSTFIX = frozenset({Operator.FACTORIAL})

CONSTANTS = {
    'π': math.pi,
    'e': math.e,
}


class Token(namedtuple('Token', 'kind text')):
    '''
    Immutable lexical unit.

    text is the literal: a canonical decimal string for numbers (maybe
    signed), the symbol for operators and functions, the symbol for
    constants (maybe prefixed with "-").
    '''
    __slots__ = ()

    @property
    def operator(self):
        '''
        Return the Operator of an operator or function token, else None.
        '''
        if self.kind in (TokenKind.OPERATOR, TokenKind.FUNCTION):
            return Operator(self.text)
        return None

    @property
    def spec(self):
        operator = self.operator
        return None if operator is None else OPERATORS[operator]

    @property
    def precedence(self):
        spec = self.spec
        return 0 if spec is None else spec.precedence

    def __str__(self):
        return self.text


OPEN = Token(TokenKind.OPEN_BRACKET, '(')
CLOSE = Token(TokenKind.CLOSE_BRACKET, ')')
TIMES = Token(TokenKind.OPERATOR, Operator.MULTIPLY.value)
