from functools import reduce
import logging
import operator

import regex

from .tokens import (CONSTANTS, OPERATORS, POSTFIX, TIMES, Operator, Token,
                     TokenKind)
from .util import UnknownTokenError


logger = logging.getLogger(__name__)


def _alternatives(symbols):
    # Longest first, so sin⁻¹ is never read as sin followed by garbage.
    symbols = sorted(symbols, key=len, reverse=True)
    return r'(?:' + r'|'.join(map(regex.escape, symbols)) + r')'


class Lexer:
    '''
    Lexer for the infix formula grammar.

    For consistency, for now, needs to be instantiated, despite holding no
    internal state.
    '''
    # Number, with the canonical decimal point. Grouping separators are the
    # display's business and must be gone by now.
    NUMBER = r'''
              # 1, 12, 1.5, or 1. while the fraction is still being typed
              [0-9]+
              (?:
                  \.
                  [0-9]*
              )?
              '''
    FUNCTION = _alternatives(operator_.value
                             for operator_ in Operator
                             if len(operator_.value) > 1)
    OPERATOR = _alternatives(operator_.value
                             for operator_ in Operator
                             if len(operator_.value) == 1)
    CONSTANT = _alternatives(CONSTANTS)
    SPACE = r'\s+'

    # All possible lexemes, in priority order.
    LEXEME = r'(?<number>' + NUMBER + r')|' \
             r'(?<function>' + FUNCTION + r')|' \
             r'(?<operator>' + OPERATOR + r')|' \
             r'(?<constant>' + CONSTANT + r')|' \
             r'(?<open>\()|' \
             r'(?<close>\))|' \
             r'(?<space>' + SPACE + r')'
    # Default regex flags for matching lexemes
    FLAGS = reduce(operator.__or__,
                   {regex.POSIX,
                    regex.VERSION1,
                    regex.VERBOSE},
                   0)

    KINDS = {
        'number': TokenKind.NUMBER,
        'function': TokenKind.FUNCTION,
        'constant': TokenKind.CONSTANT,
        'open': TokenKind.OPEN_BRACKET,
        'close': TokenKind.CLOSE_BRACKET,
    }

    def lex(self, line):
        '''
        Take a line and yield all lexemes.

        Raises UnknownTokenError once it hits something it can't lex, so
        consume it whole before trusting anything it yielded.
        '''
        while line:
            match = regex.match(type(self).LEXEME, line,
                                flags=type(self).FLAGS)
            if match is None:
                break
            yield match
            line = line[len(match.group(0)):]
        if line:
            raise UnknownTokenError(line)

    def isfeedable(self, match):
        '''
        Return True if lexeme means something to the converter.
        '''
        return 'space' not in self.matchedgroups(match).keys()

    def matchedgroups(self, match):
        '''
        Return the groups a lexeme matched.
        '''
        return {key: value
                for key, value
                in match.groupdict().items()
                if value}

    def token(self, match):
        '''
        Make a raw Token out of a lexeme match.
        '''
        (group, text), = self.matchedgroups(match).items()
        if group == 'operator':
            # √ and ! are lexed with the operators, but are functions.
            if OPERATORS[Operator(text)].arity == 1:
                return Token(TokenKind.FUNCTION, text)
            return Token(TokenKind.OPERATOR, text)
        return Token(type(self).KINDS[group], text)

    def raw(self, formula):
        '''
        Return the raw tokens of a formula, before any rewriting.
        '''
        return [self.token(match)
                for match
                in self.lex(formula)
                if self.isfeedable(match)]

    @staticmethod
    def _isunary(tokens):
        '''
        Return True if a minus following tokens would be a sign.
        '''
        if not tokens:
            return True
        previous = tokens[-1]
        if previous.kind in (TokenKind.OPERATOR, TokenKind.OPEN_BRACKET):
            return True
        return (previous.kind is TokenKind.FUNCTION and
                previous.operator not in POSTFIX)

    def tokenize(self, formula):
        '''
        Return the finalized tokens of a canonical formula.

        Folds signs into the following number or constant, and inserts the
        implied × between a number and a following constant or bracket.
        '''
        raw = self.raw(formula)
        tokens = []
        i = 0
        while i < len(raw):
            token = raw[i]
            if token.text == Operator.MINUS.value and self._isunary(tokens):
                following = raw[i + 1] if i + 1 < len(raw) else None
                if following is not None and \
                   following.kind in (TokenKind.NUMBER, TokenKind.CONSTANT):
                    tokens.append(Token(following.kind, '-' + following.text))
                    i += 2
                    continue
            if token.kind in (TokenKind.CONSTANT, TokenKind.OPEN_BRACKET) and \
               tokens and tokens[-1].kind is TokenKind.NUMBER:
                tokens.append(TIMES)
            tokens.append(token)
            i += 1
        logger.debug('tokens of %r: %s', formula, ' '.join(map(str, tokens)))
        return tokens
