"""
Calculator Language Predictive Parser
=====================================

This module implements a table-free LL(1) recursive descent parser for
the calculator language. It checks syntax only: no tree is built and no
values are computed. Instead it emits a trace line for every production
it predicts and every terminal it matches:

    predict stmt --> write expr
    matched WRITE
    predict expr --> term term_tail
    ...
    matched IDENT: x
    ...
    matched END

Prediction
----------
Every nonterminal is a method. It looks at the one lookahead token,
picks a production whose FIRST set contains that token (or, for the
nullable nonterminals stmt_list, type, term_tail and factor_tail, picks
the epsilon production when the token is in the FOLLOW set), traces the
choice, and runs the right-hand side left to right. The right-recursive
list rules (stmt_list, term_tail, factor_tail) run as loops, one trace
line per expansion, so long programs do not grow the Python stack; only
parenthesis and block nesting recurse. The selection sets
are written out below as constants; tests check them against the sets
computed by calc_checker.grammar.

Errors
------
There is no error recovery. A token that fits no prediction, or a failed
terminal match, raises CalcSyntaxError naming the token's line, and the
exception unwinds through every active nonterminal.

Example Usage
-------------
>>> from calc_checker.source import SourceReader
>>> from calc_checker.scanner import Scanner
>>> parser = Parser(Scanner(SourceReader.from_string("write 1")), trace=print)
>>> parser.parse()
predict program --> stmt_list $$
predict stmt_list --> stmt stmt_list
predict stmt --> write expr
matched WRITE
predict expr --> term term_tail
predict term --> factor factor_tail
predict factor --> i_lit
matched I_LIT: 1
predict factor_tail --> epsilon
predict term_tail --> epsilon
predict stmt_list --> epsilon
matched END
"""

from typing import Callable, Optional
import logging

from calc_checker import grammar as g
from calc_checker.errors import CalcSyntaxError, SourceLocation
from calc_checker.grammar import Nonterminal, Production
from calc_checker.scanner import Scanner, Token, TokenType

logger = logging.getLogger(__name__)

TraceSink = Callable[[str], None]


# =============================================================================
# Selection Sets
# =============================================================================

# Tokens that can begin a statement
STMT_FIRST = frozenset({
    TokenType.IDENT,
    TokenType.READ,
    TokenType.WRITE,
    TokenType.IF,
    TokenType.DO,
    TokenType.CHECK,
    TokenType.INT,
    TokenType.REAL,
})

PROGRAM_FIRST = STMT_FIRST | {TokenType.END}

# Tokens that can begin an expression (and therefore a comparison)
EXPR_FIRST = frozenset({
    TokenType.IDENT,
    TokenType.I_LIT,
    TokenType.R_LIT,
    TokenType.LPAREN,
})

COMP_OPS = frozenset({
    TokenType.GT,
    TokenType.LT,
    TokenType.EQ,
    TokenType.NE,
    TokenType.GE,
    TokenType.LE,
})

ADD_OPS = frozenset({TokenType.PLUS, TokenType.MINUS})

MUL_OPS = frozenset({TokenType.TIMES, TokenType.DIV_BY})

# Tokens that end a statement list: end of program, fi, od
STMT_LIST_FOLLOW = frozenset({TokenType.END, TokenType.FI, TokenType.OD})

# 'read' with no type is followed directly by the variable name
TYPE_FOLLOW = frozenset({TokenType.IDENT})

# An expression ends at the next statement, the end of an enclosing
# list, a comparison operator or a closing parenthesis
TERM_TAIL_FOLLOW = STMT_FIRST | STMT_LIST_FOLLOW | COMP_OPS | {TokenType.RPAREN}

# A term may additionally be followed by an adding operator
FACTOR_TAIL_FOLLOW = TERM_TAIL_FOLLOW | ADD_OPS


# =============================================================================
# Parser Implementation
# =============================================================================

class Parser:
    """
    Predictive parser for the calculator language.

    The parser always holds exactly one lookahead token. The constructor
    primes it with a BEGIN token, which ``parse()`` replaces with the
    first real token before any grammar rule runs.

    Usage:
        parser = Parser(scanner, trace=print)
        parser.parse()

    Attributes:
        scanner: Token source
        filename: Source name used in error locations
    """

    def __init__(self, scanner: Scanner, trace: Optional[TraceSink] = None):
        """
        Initialize the parser.

        Args:
            scanner: The scanner supplying tokens
            trace: Called with each trace line; trace is discarded if None
        """
        self.scanner = scanner
        self.filename = scanner.filename
        self._trace = trace
        self._next_token = Token(TokenType.BEGIN, "", 0, 0)

    def parse(self) -> None:
        """
        Check that the whole input is a calculator program.

        Returns normally once END has been matched.

        Raises:
            LexicalError: If the scanner meets an invalid character
            CalcSyntaxError: If the token stream does not fit the grammar
        """
        self._next_token = self.scanner.scan()
        self._program()
        logger.debug(f"parsed {self.scanner.token_count} tokens")

    def eat(self, expected: TokenType) -> None:
        """
        Match the lookahead against an expected terminal and advance.

        Raises:
            CalcSyntaxError: If the lookahead is of a different type
        """
        if self._next_token.type != expected:
            raise self._error()

        self._emit(f"matched {self._next_token.describe()}")
        self._next_token = self.scanner.scan()

    # =========================================================================
    # Helpers
    # =========================================================================

    def _emit(self, line: str) -> None:
        if self._trace is not None:
            self._trace(line)

    def _predict(self, production: Production) -> None:
        """Trace the production chosen for the current nonterminal."""
        self._emit(f"predict {production}")

    def _check(self, types: frozenset[TokenType]) -> bool:
        """Check if the lookahead is one of the given types."""
        return self._next_token.type in types

    def _error(self, nonterminal: Optional[Nonterminal] = None) -> CalcSyntaxError:
        """Create a syntax error located at the lookahead token."""
        token = self._next_token
        location = SourceLocation(self.filename, token.line, token.column)

        # The reader still holds the token's line unless the token is END
        source_line = None
        if self.scanner.reader.line == token.line and token.type != TokenType.END:
            source_line = self.scanner.reader.current_line

        return CalcSyntaxError(
            token.type.name,
            location,
            nonterminal=nonterminal.value if nonterminal else None,
            source_line=source_line,
        )

    # =========================================================================
    # Program Structure
    # =========================================================================

    def _program(self) -> None:
        if not self._check(PROGRAM_FIRST):
            raise self._error(Nonterminal.PROGRAM)

        self._predict(g.PROGRAM)
        self._stmt_list()
        self.eat(TokenType.END)

    def _stmt_list(self) -> None:
        # stmt_list --> stmt stmt_list, iterated; each pass is one expansion
        while self._check(STMT_FIRST):
            self._predict(g.STMT_LIST_STMT)
            self._stmt()

        if not self._check(STMT_LIST_FOLLOW):
            raise self._error(Nonterminal.STMT_LIST)
        self._predict(g.STMT_LIST_EMPTY)

    def _stmt(self) -> None:
        token_type = self._next_token.type

        if token_type == TokenType.IDENT:
            self._predict(g.STMT_ASSIGN)
            self.eat(TokenType.IDENT)
            self.eat(TokenType.GETS)
            self._expr()

        elif token_type == TokenType.READ:
            self._predict(g.STMT_READ)
            self.eat(TokenType.READ)
            self._type()
            self.eat(TokenType.IDENT)

        elif token_type == TokenType.WRITE:
            self._predict(g.STMT_WRITE)
            self.eat(TokenType.WRITE)
            self._expr()

        elif token_type == TokenType.IF:
            self._predict(g.STMT_IF)
            self.eat(TokenType.IF)
            self._comp()
            self._stmt_list()
            self.eat(TokenType.FI)

        elif token_type == TokenType.DO:
            self._predict(g.STMT_DO)
            self.eat(TokenType.DO)
            self._stmt_list()
            self.eat(TokenType.OD)

        elif token_type == TokenType.CHECK:
            self._predict(g.STMT_CHECK)
            self.eat(TokenType.CHECK)
            self._comp()

        elif token_type == TokenType.INT:
            self._predict(g.STMT_INT_DECL)
            self.eat(TokenType.INT)
            self.eat(TokenType.IDENT)
            self.eat(TokenType.GETS)
            self._expr()

        elif token_type == TokenType.REAL:
            self._predict(g.STMT_REAL_DECL)
            self.eat(TokenType.REAL)
            self.eat(TokenType.IDENT)
            self.eat(TokenType.GETS)
            self._expr()

        else:
            raise self._error(Nonterminal.STMT)

    def _type(self) -> None:
        token_type = self._next_token.type

        if token_type == TokenType.INT:
            self._predict(g.TYPE_INT)
            self.eat(TokenType.INT)
        elif token_type == TokenType.REAL:
            self._predict(g.TYPE_REAL)
            self.eat(TokenType.REAL)
        elif self._check(TYPE_FOLLOW):
            self._predict(g.TYPE_EMPTY)
        else:
            raise self._error(Nonterminal.TYPE)

    # =========================================================================
    # Expressions
    # =========================================================================

    def _comp(self) -> None:
        if not self._check(EXPR_FIRST):
            raise self._error(Nonterminal.COMP)

        self._predict(g.COMP)
        self._expr()
        self._comp_op()
        self._expr()

    def _expr(self) -> None:
        if not self._check(EXPR_FIRST):
            raise self._error(Nonterminal.EXPR)

        self._predict(g.EXPR)
        self._term()
        self._term_tail()

    def _term(self) -> None:
        if not self._check(EXPR_FIRST):
            raise self._error(Nonterminal.TERM)

        self._predict(g.TERM)
        self._factor()
        self._factor_tail()

    def _term_tail(self) -> None:
        while self._check(ADD_OPS):
            self._predict(g.TERM_TAIL_ADD)
            self._add_op()
            self._term()

        if not self._check(TERM_TAIL_FOLLOW):
            raise self._error(Nonterminal.TERM_TAIL)
        self._predict(g.TERM_TAIL_EMPTY)

    def _factor(self) -> None:
        token_type = self._next_token.type

        if token_type == TokenType.IDENT:
            self._predict(g.FACTOR_IDENT)
            self.eat(TokenType.IDENT)
        elif token_type == TokenType.I_LIT:
            self._predict(g.FACTOR_I_LIT)
            self.eat(TokenType.I_LIT)
        elif token_type == TokenType.R_LIT:
            self._predict(g.FACTOR_R_LIT)
            self.eat(TokenType.R_LIT)
        elif token_type == TokenType.LPAREN:
            self._predict(g.FACTOR_PAREN)
            self.eat(TokenType.LPAREN)
            self._expr()
            self.eat(TokenType.RPAREN)
        else:
            raise self._error(Nonterminal.FACTOR)

    def _factor_tail(self) -> None:
        while self._check(MUL_OPS):
            self._predict(g.FACTOR_TAIL_MUL)
            self._mul_op()
            self._factor()

        if not self._check(FACTOR_TAIL_FOLLOW):
            raise self._error(Nonterminal.FACTOR_TAIL)
        self._predict(g.FACTOR_TAIL_EMPTY)

    # =========================================================================
    # Operators
    # =========================================================================

    # operator token -> production, one table per operator nonterminal
    _COMP_OP_PRODUCTIONS = {
        TokenType.GT: g.COMP_OP_GT,
        TokenType.LT: g.COMP_OP_LT,
        TokenType.EQ: g.COMP_OP_EQ,
        TokenType.NE: g.COMP_OP_NE,
        TokenType.GE: g.COMP_OP_GE,
        TokenType.LE: g.COMP_OP_LE,
    }

    _ADD_OP_PRODUCTIONS = {
        TokenType.PLUS: g.ADD_OP_PLUS,
        TokenType.MINUS: g.ADD_OP_MINUS,
    }

    _MUL_OP_PRODUCTIONS = {
        TokenType.TIMES: g.MUL_OP_TIMES,
        TokenType.DIV_BY: g.MUL_OP_DIV_BY,
    }

    def _comp_op(self) -> None:
        self._operator(Nonterminal.COMP_OP, self._COMP_OP_PRODUCTIONS)

    def _add_op(self) -> None:
        self._operator(Nonterminal.ADD_OP, self._ADD_OP_PRODUCTIONS)

    def _mul_op(self) -> None:
        self._operator(Nonterminal.MUL_OP, self._MUL_OP_PRODUCTIONS)

    def _operator(
        self,
        nonterminal: Nonterminal,
        productions: dict[TokenType, Production],
    ) -> None:
        """Expand a nonterminal whose productions are single operator tokens."""
        token_type = self._next_token.type
        production = productions.get(token_type)
        if production is None:
            raise self._error(nonterminal)

        self._predict(production)
        self.eat(token_type)
