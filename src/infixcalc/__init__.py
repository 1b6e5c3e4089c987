'''
Infix calculator.

Takes formulas as typed on a calculator keypad, 3+4×2, sin(30), 2(3+4), 5!,
and evaluates them with Decimal arithmetic: exact sums, differences and
products, rounded quotients and powers, float trigonometry.

Pieces, leaf first:

- Lexer: formula text to tokens, signs folded, implied × inserted.
- Converter: tokens to RPN, shunting-yard.
- Machine: RPN to a Decimal.
- FormulaEditor: the key press state machine driving all of the above.
- state: the editor's state to and from a flat record.
'''

# TODO: Scientific notation for results too long to show positionally.

from .cli import CLI
from .converter import Converter
from .editor import EditorState, FormulaEditor, LastKey, Operation
from .formatting import NumberFormat
from .lexer import Lexer
from .machine import Machine
from .pipeline import EvaluationResult, evaluate


__all__ = ('Lexer', 'Converter', 'Machine', 'evaluate', 'EvaluationResult',
           'FormulaEditor', 'EditorState', 'LastKey', 'Operation',
           'NumberFormat', 'CLI')
