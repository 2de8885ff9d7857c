"""
Calculator Language Grammar
===========================

The LL(1) grammar of the calculator language, held as immutable data,
together with the FIRST/FOLLOW analysis used to check it.

Grammar
-------
program     --> stmt_list $$
stmt_list   --> stmt stmt_list | epsilon
type        --> int | real | epsilon
stmt        --> ident ':=' expr
              | read type ident
              | write expr
              | if comp stmt_list fi
              | do stmt_list od
              | check comp
              | int ident ':=' expr
              | real ident ':=' expr
comp        --> expr comp_op expr
expr        --> term term_tail
term        --> factor factor_tail
term_tail   --> add_op term term_tail | epsilon
factor      --> ident | i_lit | r_lit | '(' expr ')'
factor_tail --> mul_op factor factor_tail | epsilon
comp_op     --> '>' | '<' | '==' | '!=' | '>=' | '<='
add_op      --> '+' | '-'
mul_op      --> '*' | '/'

The parser does not interpret this data: each nonterminal is a method
with its selection sets written out by hand. The productions defined
here supply the text of every ``predict`` trace line, and the analysis
functions let the tests confirm that the hand-written selection sets are
the real FIRST and FOLLOW sets.

Example Usage
-------------
>>> analysis = GrammarAnalysis.analyze()
>>> sorted(t.name for t in analysis.follow[Nonterminal.STMT_LIST])
['END', 'FI', 'OD']
>>> str(STMT_WRITE)
'stmt --> write expr'
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Union

from calc_checker.scanner import TokenType


# =============================================================================
# Symbols
# =============================================================================

class Nonterminal(Enum):
    """Grammar nonterminals; the value is the name used in the trace."""

    PROGRAM = "program"
    STMT_LIST = "stmt_list"
    STMT = "stmt"
    TYPE = "type"
    COMP = "comp"
    EXPR = "expr"
    TERM = "term"
    TERM_TAIL = "term_tail"
    FACTOR = "factor"
    FACTOR_TAIL = "factor_tail"
    COMP_OP = "comp_op"
    ADD_OP = "add_op"
    MUL_OP = "mul_op"


Symbol = Union[Nonterminal, TokenType]

# How terminals are spelled on the right-hand side of a production
TERMINAL_SPELLING: dict[TokenType, str] = {
    TokenType.END: "$$",
    TokenType.READ: "read",
    TokenType.WRITE: "write",
    TokenType.IF: "if",
    TokenType.FI: "fi",
    TokenType.DO: "do",
    TokenType.OD: "od",
    TokenType.CHECK: "check",
    TokenType.INT: "int",
    TokenType.REAL: "real",
    TokenType.IDENT: "ident",
    TokenType.I_LIT: "i_lit",
    TokenType.R_LIT: "r_lit",
    TokenType.GETS: "':='",
    TokenType.GT: "'>'",
    TokenType.LT: "'<'",
    TokenType.EQ: "'=='",
    TokenType.NE: "'!='",
    TokenType.GE: "'>='",
    TokenType.LE: "'<='",
    TokenType.PLUS: "'+'",
    TokenType.MINUS: "'-'",
    TokenType.TIMES: "'*'",
    TokenType.DIV_BY: "'/'",
    TokenType.LPAREN: "'('",
    TokenType.RPAREN: "')'",
}

EPSILON = "epsilon"


def spell(symbol: Symbol) -> str:
    """Return the grammar spelling of a terminal or nonterminal."""
    if isinstance(symbol, Nonterminal):
        return symbol.value
    return TERMINAL_SPELLING[symbol]


# =============================================================================
# Productions
# =============================================================================

@dataclass(frozen=True)
class Production:
    """
    One grammar production.

    Attributes:
        lhs: The nonterminal being defined
        rhs: Right-hand side symbols, empty for an epsilon production
    """
    lhs: Nonterminal
    rhs: tuple[Symbol, ...]

    @property
    def is_epsilon(self) -> bool:
        return not self.rhs

    def describe_rhs(self) -> str:
        """Right-hand side as printed in the trace."""
        if self.is_epsilon:
            return EPSILON
        return " ".join(spell(symbol) for symbol in self.rhs)

    def __str__(self) -> str:
        return f"{self.lhs.value} --> {self.describe_rhs()}"


N = Nonterminal
T = TokenType

PROGRAM = Production(N.PROGRAM, (N.STMT_LIST, T.END))

STMT_LIST_STMT = Production(N.STMT_LIST, (N.STMT, N.STMT_LIST))
STMT_LIST_EMPTY = Production(N.STMT_LIST, ())

TYPE_INT = Production(N.TYPE, (T.INT,))
TYPE_REAL = Production(N.TYPE, (T.REAL,))
TYPE_EMPTY = Production(N.TYPE, ())

STMT_ASSIGN = Production(N.STMT, (T.IDENT, T.GETS, N.EXPR))
STMT_READ = Production(N.STMT, (T.READ, N.TYPE, T.IDENT))
STMT_WRITE = Production(N.STMT, (T.WRITE, N.EXPR))
STMT_IF = Production(N.STMT, (T.IF, N.COMP, N.STMT_LIST, T.FI))
STMT_DO = Production(N.STMT, (T.DO, N.STMT_LIST, T.OD))
STMT_CHECK = Production(N.STMT, (T.CHECK, N.COMP))
STMT_INT_DECL = Production(N.STMT, (T.INT, T.IDENT, T.GETS, N.EXPR))
STMT_REAL_DECL = Production(N.STMT, (T.REAL, T.IDENT, T.GETS, N.EXPR))

COMP = Production(N.COMP, (N.EXPR, N.COMP_OP, N.EXPR))

EXPR = Production(N.EXPR, (N.TERM, N.TERM_TAIL))

TERM = Production(N.TERM, (N.FACTOR, N.FACTOR_TAIL))

TERM_TAIL_ADD = Production(N.TERM_TAIL, (N.ADD_OP, N.TERM, N.TERM_TAIL))
TERM_TAIL_EMPTY = Production(N.TERM_TAIL, ())

FACTOR_IDENT = Production(N.FACTOR, (T.IDENT,))
FACTOR_I_LIT = Production(N.FACTOR, (T.I_LIT,))
FACTOR_R_LIT = Production(N.FACTOR, (T.R_LIT,))
FACTOR_PAREN = Production(N.FACTOR, (T.LPAREN, N.EXPR, T.RPAREN))

FACTOR_TAIL_MUL = Production(N.FACTOR_TAIL, (N.MUL_OP, N.FACTOR, N.FACTOR_TAIL))
FACTOR_TAIL_EMPTY = Production(N.FACTOR_TAIL, ())

COMP_OP_GT = Production(N.COMP_OP, (T.GT,))
COMP_OP_LT = Production(N.COMP_OP, (T.LT,))
COMP_OP_EQ = Production(N.COMP_OP, (T.EQ,))
COMP_OP_NE = Production(N.COMP_OP, (T.NE,))
COMP_OP_GE = Production(N.COMP_OP, (T.GE,))
COMP_OP_LE = Production(N.COMP_OP, (T.LE,))

ADD_OP_PLUS = Production(N.ADD_OP, (T.PLUS,))
ADD_OP_MINUS = Production(N.ADD_OP, (T.MINUS,))

MUL_OP_TIMES = Production(N.MUL_OP, (T.TIMES,))
MUL_OP_DIV_BY = Production(N.MUL_OP, (T.DIV_BY,))

# All productions, grouped by nonterminal in declaration order
GRAMMAR: tuple[Production, ...] = (
    PROGRAM,
    STMT_LIST_STMT, STMT_LIST_EMPTY,
    TYPE_INT, TYPE_REAL, TYPE_EMPTY,
    STMT_ASSIGN, STMT_READ, STMT_WRITE, STMT_IF,
    STMT_DO, STMT_CHECK, STMT_INT_DECL, STMT_REAL_DECL,
    COMP,
    EXPR,
    TERM,
    TERM_TAIL_ADD, TERM_TAIL_EMPTY,
    FACTOR_IDENT, FACTOR_I_LIT, FACTOR_R_LIT, FACTOR_PAREN,
    FACTOR_TAIL_MUL, FACTOR_TAIL_EMPTY,
    COMP_OP_GT, COMP_OP_LT, COMP_OP_EQ, COMP_OP_NE, COMP_OP_GE, COMP_OP_LE,
    ADD_OP_PLUS, ADD_OP_MINUS,
    MUL_OP_TIMES, MUL_OP_DIV_BY,
)

START = Nonterminal.PROGRAM

del N, T


def productions_for(nonterminal: Nonterminal, grammar: Iterable[Production] = GRAMMAR) -> list[Production]:
    """Return the productions of one nonterminal, in declaration order."""
    return [p for p in grammar if p.lhs == nonterminal]


# =============================================================================
# FIRST / FOLLOW Analysis
# =============================================================================

def compute_nullable(grammar: Iterable[Production] = GRAMMAR) -> frozenset[Nonterminal]:
    """Return the nonterminals that can derive the empty string."""
    grammar = tuple(grammar)
    nullable: set[Nonterminal] = set()

    changed = True
    while changed:
        changed = False
        for production in grammar:
            if production.lhs in nullable:
                continue
            if all(symbol in nullable for symbol in production.rhs):
                nullable.add(production.lhs)
                changed = True

    return frozenset(nullable)


def first_of_sequence(
    symbols: Iterable[Symbol],
    first: dict[Nonterminal, frozenset[TokenType]],
    nullable: frozenset[Nonterminal],
) -> tuple[frozenset[TokenType], bool]:
    """
    FIRST set of a symbol sequence.

    Returns:
        Tuple of (terminals that can begin the sequence,
        whether the whole sequence can derive the empty string)
    """
    result: set[TokenType] = set()
    for symbol in symbols:
        if isinstance(symbol, TokenType):
            result.add(symbol)
            return frozenset(result), False
        result |= first[symbol]
        if symbol not in nullable:
            return frozenset(result), False
    return frozenset(result), True


def compute_first_sets(
    grammar: Iterable[Production] = GRAMMAR,
    nullable: frozenset[Nonterminal] | None = None,
) -> dict[Nonterminal, frozenset[TokenType]]:
    """
    Compute FIRST sets of every nonterminal by fixed-point iteration.

    Epsilon is not included; use compute_nullable() for that.
    """
    grammar = tuple(grammar)
    if nullable is None:
        nullable = compute_nullable(grammar)

    first: dict[Nonterminal, frozenset[TokenType]] = {
        p.lhs: frozenset() for p in grammar
    }

    changed = True
    while changed:
        changed = False
        for production in grammar:
            terminals, _ = first_of_sequence(production.rhs, first, nullable)
            merged = first[production.lhs] | terminals
            if merged != first[production.lhs]:
                first[production.lhs] = merged
                changed = True

    return first


def compute_follow_sets(
    grammar: Iterable[Production] = GRAMMAR,
    first: dict[Nonterminal, frozenset[TokenType]] | None = None,
    nullable: frozenset[Nonterminal] | None = None,
) -> dict[Nonterminal, frozenset[TokenType]]:
    """
    Compute FOLLOW sets of every nonterminal by fixed-point iteration.

    The start symbol's production ends with END ($$) explicitly, so no
    end marker is seeded into FOLLOW(program).
    """
    grammar = tuple(grammar)
    if nullable is None:
        nullable = compute_nullable(grammar)
    if first is None:
        first = compute_first_sets(grammar, nullable)

    follow: dict[Nonterminal, frozenset[TokenType]] = {
        p.lhs: frozenset() for p in grammar
    }

    changed = True
    while changed:
        changed = False
        for production in grammar:
            for index, symbol in enumerate(production.rhs):
                if not isinstance(symbol, Nonterminal):
                    continue
                rest = production.rhs[index + 1:]
                terminals, rest_nullable = first_of_sequence(rest, first, nullable)
                merged = follow[symbol] | terminals
                if rest_nullable:
                    merged |= follow[production.lhs]
                if merged != follow[symbol]:
                    follow[symbol] = merged
                    changed = True

    return follow


@dataclass(frozen=True)
class Conflict:
    """Two productions of one nonterminal predicted by the same tokens."""
    nonterminal: Nonterminal
    first: Production
    second: Production
    tokens: frozenset[TokenType]


@dataclass(frozen=True)
class GrammarAnalysis:
    """
    FIRST, FOLLOW and nullability of a grammar.

    Attributes:
        grammar: The productions analyzed
        nullable: Nonterminals deriving the empty string
        first: FIRST set per nonterminal (without epsilon)
        follow: FOLLOW set per nonterminal
    """
    grammar: tuple[Production, ...]
    nullable: frozenset[Nonterminal]
    first: dict[Nonterminal, frozenset[TokenType]]
    follow: dict[Nonterminal, frozenset[TokenType]]

    @classmethod
    def analyze(cls, grammar: Iterable[Production] = GRAMMAR) -> "GrammarAnalysis":
        """Run the full analysis over a grammar."""
        grammar = tuple(grammar)
        nullable = compute_nullable(grammar)
        first = compute_first_sets(grammar, nullable)
        follow = compute_follow_sets(grammar, first, nullable)
        return cls(grammar, nullable, first, follow)

    def predict_set(self, production: Production) -> frozenset[TokenType]:
        """
        Tokens that select this production.

        FIRST of the right-hand side, plus FOLLOW of the left-hand side
        when the right-hand side can vanish.
        """
        terminals, vanishes = first_of_sequence(production.rhs, self.first, self.nullable)
        if vanishes:
            terminals |= self.follow[production.lhs]
        return terminals

    def conflicts(self) -> list[Conflict]:
        """Return every pair of productions whose predict sets overlap."""
        found = []
        nonterminals = dict.fromkeys(p.lhs for p in self.grammar)
        for nonterminal in nonterminals:
            alternatives = productions_for(nonterminal, self.grammar)
            for i, left in enumerate(alternatives):
                for right in alternatives[i + 1:]:
                    overlap = self.predict_set(left) & self.predict_set(right)
                    if overlap:
                        found.append(Conflict(nonterminal, left, right, overlap))
        return found

    def is_ll1(self) -> bool:
        return not self.conflicts()

    def format_report(self) -> str:
        """Format productions, FIRST and FOLLOW sets for display."""
        lines = ["Productions:"]
        for production in self.grammar:
            lines.append(f"  {production}")

        lines.append("")
        lines.append("FIRST:")
        for nonterminal, terminals in self.first.items():
            names = _format_terminals(terminals)
            if nonterminal in self.nullable:
                names = f"{names} {EPSILON}".strip()
            lines.append(f"  {nonterminal.value}: {names}")

        lines.append("")
        lines.append("FOLLOW:")
        for nonterminal, terminals in self.follow.items():
            lines.append(f"  {nonterminal.value}: {_format_terminals(terminals)}")

        conflicts = self.conflicts()
        lines.append("")
        if conflicts:
            lines.append("Conflicts:")
            for conflict in conflicts:
                lines.append(
                    f"  {conflict.first} / {conflict.second} on "
                    f"{_format_terminals(conflict.tokens)}"
                )
        else:
            lines.append("Grammar is LL(1)")

        return "\n".join(lines)


def _format_terminals(terminals: Iterable[TokenType]) -> str:
    return " ".join(sorted(spell(t) for t in terminals))
