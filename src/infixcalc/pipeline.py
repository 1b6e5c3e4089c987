'''
Formula in, EvaluationResult out: lexer, converter, then machine.
'''

from collections import namedtuple
import logging

from .converter import Converter
from .lexer import Lexer
from .machine import Machine
from .util import CalcError


logger = logging.getLogger(__name__)


class EvaluationResult(namedtuple('EvaluationResult', 'value error')):
    '''
    Either a Decimal value, or the CalcError that prevented one.
    '''
    __slots__ = ()

    @property
    def ok(self):
        return self.error is None

    @property
    def kind(self):
        return None if self.error is None else self.error.kind


_lexer = Lexer()
_converter = Converter()


def evaluate(formula, degrees=False):
    '''
    Evaluate a canonical formula (no grouping, "." decimal point).

    Never raises a CalcError: failures come back in the result. Tokenizes
    once per call; nothing is cached between calls.
    '''
    try:
        tokens = _lexer.tokenize(formula)
        rpn = _converter.convert(tokens)
        value = Machine(degrees=degrees).run(rpn)
    except CalcError as e:
        logger.debug('%r failed: %s', formula, e)
        return EvaluationResult(None, e)
    return EvaluationResult(value, None)
