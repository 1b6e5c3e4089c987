import logging

from .tokens import FUNCTION_PRECEDENCE, TokenKind
from .util import UnbalancedBracketsError, UnknownTokenError


logger = logging.getLogger(__name__)


class Converter:
    '''
    Infix to RPN converter (shunting-yard).

    Every binary operator is left-associative, power included: 2^3^2 is
    (2^3)^2. Functions and factorial wait on the operator stack until
    whatever they apply to has been output.
    '''

    def convert(self, tokens):
        '''
        Return tokens reordered to RPN.

        Raises UnbalancedBracketsError; nothing partial is ever returned.
        '''
        stack = []
        output = []
        for token in tokens:
            if token.kind in (TokenKind.NUMBER, TokenKind.CONSTANT):
                output.append(token)
            elif token.kind in (TokenKind.FUNCTION, TokenKind.OPEN_BRACKET):
                stack.append(token)
            elif token.kind is TokenKind.CLOSE_BRACKET:
                self._close(stack, output)
            elif token.kind is TokenKind.OPERATOR:
                while stack and \
                      stack[-1].kind is not TokenKind.OPEN_BRACKET and \
                      stack[-1].precedence >= token.precedence:
                    output.append(stack.pop())
                stack.append(token)
            else:
                raise UnknownTokenError(token)
        while stack:
            token = stack.pop()
            if token.kind in (TokenKind.OPEN_BRACKET,
                              TokenKind.CLOSE_BRACKET):
                raise UnbalancedBracketsError(token)
            output.append(token)
        logger.debug('rpn: %s', ' '.join(map(str, output)))
        return output

    @staticmethod
    def _close(stack, output):
        '''
        Pop everything down to the matching bracket, and its function.
        '''
        while stack and stack[-1].kind is not TokenKind.OPEN_BRACKET:
            output.append(stack.pop())
        if not stack:
            raise UnbalancedBracketsError(')')
        stack.pop()
        # sin( ... ) applies as soon as its bracket closes.
        if stack and stack[-1].precedence == FUNCTION_PRECEDENCE:
            output.append(stack.pop())
