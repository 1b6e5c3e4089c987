from os import isatty, path
import sys
from sys import stdin, stdout, exit
from argparse import ArgumentParser, REMAINDER, OPTIONAL
from datetime import datetime
import locale
import logging

from prompt_toolkit import PromptSession
from prompt_toolkit.history import FileHistory
import regex

from . import state
from .converter import Converter
from .editor import FormulaEditor, Operation
from .formatting import NumberFormat
from .lexer import Lexer
from .util import CalcError, UnknownTokenError


logger = logging.getLogger(__name__)


class InteractiveInput:
    def __init__(self, prompt, rprompt=None, history=None):
        self.prompt = prompt
        self.rprompt = rprompt
        self.history = history

    def __iter__(self):
        try:
            session = PromptSession(message=self.prompt,
                                    vi_mode=True,
                                    enable_suspend=True,
                                    enable_open_in_editor=True,
                                    # Persistent
                                    history=self.history,
                                    # Angle mode
                                    rprompt=self.rprompt,
                                    prompt_continuation=' ' * len(self.prompt),
                                    # Debatable. Interferes with X11 selection.
                                    mouse_support=True,
                                    # Certainly not! But be explicit.
                                    erase_when_done=False)
            while True:
                yield session.prompt()
        except EOFError:
            return


class CLI:
    '''
    Command line interface to the formula editor.

    Every line is a run of key presses; the result display is printed after
    each line.
    '''

    DEFAULT_PROMPT = '> '
    HISTORY_FILE = '~/.infixcalc_history'

    # Keys typing an operation, ASCII spellings included.
    OPERATIONS = {
        '+': Operation.PLUS,
        '-': Operation.MINUS,
        '*': Operation.MULTIPLY,
        'x': Operation.MULTIPLY,
        '×': Operation.MULTIPLY,
        '/': Operation.DIVIDE,
        '÷': Operation.DIVIDE,
        '^': Operation.POWER,
        '√': Operation.ROOT,
        'sqrt': Operation.ROOT,
        'log': Operation.LOG,
        'ln': Operation.LN,
        '(': Operation.OPEN_BRACKET,
        ')': Operation.CLOSE_BRACKET,
        'sin': Operation.SIN,
        'cos': Operation.COS,
        'tan': Operation.TAN,
        'asin': Operation.ARCSIN,
        'acos': Operation.ARCCOS,
        'atan': Operation.ARCTAN,
        '!': Operation.FACTORIAL,
        'pi': Operation.PI,
        'π': Operation.PI,
        'e': Operation.E,
    }
    # Keys calling an editor method of the same name.
    EDITOR_KEYS = {
        '.': 'decimal_point',
        '=': 'equals',
        '<': 'clear',
        'clear': 'clear',
        'reset': 'reset',
    }
    # Keys calling a CLI method.
    CLI_KEYS = {
        'deg': 'degrees',
        'rad': 'radians',
        'history': 'print_history',
    }

    KEY = r'(?<digit>[0-9])|' \
          r'(?<key>' + r'|'.join(map(regex.escape,
                                     sorted(set(OPERATIONS) |
                                            set(EDITOR_KEYS) |
                                            set(CLI_KEYS),
                                            key=len, reverse=True))) + r')|' \
          r'(?<space>\s+)'

    def keys(self, line):
        '''
        Yield the key presses of a line.
        '''
        while line:
            match = regex.match(type(self).KEY, line, flags=regex.POSIX)
            if match is None:
                raise UnknownTokenError(line.strip())
            if match.group('space') is None:
                yield match.group(0)
            line = line[len(match.group(0)):]

    def press(self, key):
        '''
        Press one key on the editor.
        '''
        cls = type(self)
        if key in cls.OPERATIONS:
            self.editor.operation(cls.OPERATIONS[key])
        elif key in cls.EDITOR_KEYS:
            getattr(self.editor, cls.EDITOR_KEYS[key])()
        elif key in cls.CLI_KEYS:
            getattr(self, cls.CLI_KEYS[key])()
        else:
            self.editor.digit(key)

    def degrees(self):
        self.editor.degrees = True

    def radians(self):
        self.editor.degrees = False

    def _angle_mode(self):
        return 'DEG' if self.editor.degrees else 'RAD'

    def _record(self, formula, result, timestamp):
        self.history.append((formula, result, timestamp))

    def _error(self, message, severity):
        print(message, file=sys.stderr)

    def print_history(self):
        '''
        Print every formula evaluated this session, oldest first.
        '''
        for formula, result, timestamp in self.history:
            when = datetime.fromtimestamp(timestamp / 1000)
            print(when.isoformat(sep=' ', timespec='seconds'),
                  formula, '=', result, sep='\t')

    def executor(self):
        '''
        Feed key presses to the editor.
        '''
        for line in self.args.expressions:
            try:
                for key in self.keys(line):
                    self.press(key)
            # Abort entire rest of line, makes sense anyway
            except CalcError as e:
                print(e.message, file=sys.stderr)
            print(self.editor.state.result)

    def dumper(self):
        '''
        Dump tokens and RPN of each canonical formula.
        '''
        lexer = Lexer()
        converter = Converter()
        print('<tokens>\t<rpn>')
        for line in self.args.expressions:
            try:
                tokens = lexer.tokenize(line.strip())
                rpn = converter.convert(tokens)
            except CalcError as e:
                print(e.message, file=sys.stderr)
                continue
            print(' '.join(map(str, tokens)),
                  ' '.join(map(str, rpn)),
                  sep='\t')

    def raw_grammar(self):
        '''
        Print current internally defined formula grammar.
        '''
        print(Lexer.LEXEME)

    def _prompting_input(self):
        '''
        Return prompting stdin.__iter__ decorator...

        If either:
        - prompt explicitly specified.
        - both stdin/out are a tty
        '''
        if self.args.prompt or \
           isatty(stdin.fileno()) and isatty(stdout.fileno()):
            return InteractiveInput(prompt=self.args.prompt or
                                    self.DEFAULT_PROMPT,
                                    rprompt=self._angle_mode,
                                    history=FileHistory(
                                        path.expanduser(self.HISTORY_FILE)))
        else:
            return stdin

    def _load_state(self):
        '''
        Return the saved editor state, if asked for and there is one.
        '''
        if not self.args.state or not path.exists(self.args.state):
            return None
        with open(self.args.state, encoding='utf-8') as fp:
            try:
                return state.loads(fp.read())
            except (CalcError, UnicodeDecodeError) as e:
                logger.warning('Ignoring %s: %s', self.args.state, e)
                return None

    def _save_state(self):
        if not self.args.state:
            return
        with open(self.args.state, 'w', encoding='utf-8') as fp:
            fp.write(state.dumps(self.editor.state))

    def _number_format(self):
        if self.args.locale:
            locale.setlocale(locale.LC_NUMERIC, '')
            return NumberFormat.from_locale()
        return NumberFormat()

    def __init__(self):
        '''
        Create ready to run CLI.

        Does not run or parse command line arguments.
        '''
        self.history = []
        self.editor = None
        self.argument_parser = ArgumentParser(description='Infix calculator')
        self.argument_parser.add_argument('-v', '--verbose',
                                          action='store_true')
        self.argument_parser.add_argument('-d', '--degrees',
                                          action='store_true',
                                          help='trigonometry in degrees')
        self.argument_parser.add_argument('-l', '--locale',
                                          action='store_true',
                                          help='use the locale\'s separators')
        self.argument_parser.add_argument('-s', '--state',
                                          metavar='FILE',
                                          help='resume from and save to FILE')
        int_nonint_groups = self.argument_parser.add_mutually_exclusive_group()
        int_nonint_groups.add_argument('-e', '--expression',
                                       nargs=REMAINDER,
                                       dest='expressions')
        int_nonint_groups.add_argument('-p', '--prompt',
                                       nargs=OPTIONAL,
                                       const=self.DEFAULT_PROMPT)
        main_groups = self.argument_parser.add_mutually_exclusive_group()
        for short_, long_, action in [('-G', '--raw-grammar',
                                       self.raw_grammar),
                                      ('-D', '--dump', self.dumper)]:
            main_groups.add_argument(short_, long_,
                                     action='store_const',
                                     const=action,
                                     dest='action')
        self.argument_parser.set_defaults(action=self.executor,
                                          expressions=stdin)

    def run(self, *, args=None):
        '''
        Run CLI, given these args, or previously passed CLI args.
        '''
        self.args = self.argument_parser.parse_args(args)
        logging.basicConfig(level=logging.DEBUG if self.args.verbose
                            else logging.WARNING,
                            format='%(levelname)s: %(message)s')
        self.editor = FormulaEditor(state=self._load_state(),
                                    number_format=self._number_format(),
                                    on_error=self._error,
                                    on_history=self._record)
        if self.args.degrees:
            self.editor.degrees = True
        if self.args.expressions is stdin:
            self.args.expressions = self._prompting_input()
        try:
            self.args.action()
        except KeyboardInterrupt:
            exit(1)
        finally:
            self._save_state()
