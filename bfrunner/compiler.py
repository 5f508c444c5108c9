"""
bfrunner Compiler

Turns Brainfuck source text into an immutable instruction tree.

Compilation phases:
1. Lexical Analysis → Token stream (operators only; everything else is comment)
2. Parsing → Program tree, with run-length merging of >< and +- runs
   and bracket nesting resolved into Loop nodes

Operators:
    >   Move the pointer right        <   Move the pointer left
    +   Increment the current cell    -   Decrement the current cell
    .   Output the current cell       ,   Input a byte into the current cell
    [   Loop while the current cell is non-zero
    ]   End of loop body

Example:
    program = parse("++[>+<-]>.")
    print(render(program))  # Add(+2), Loop[4] with its body indented, Move(+1), Output
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator, Optional

from bfrunner.errors import UnmatchedClosingBracket, UnmatchedOpeningBracket

logger = logging.getLogger(__name__)


# ============================================================================
# Token Types
# ============================================================================

class TokenType(Enum):
    RIGHT = auto()       # >
    LEFT = auto()        # <
    INC = auto()         # +
    DEC = auto()         # -
    OUTPUT = auto()      # .
    INPUT = auto()       # ,
    LOOP_OPEN = auto()   # [
    LOOP_CLOSE = auto()  # ]
    EOF = auto()


@dataclass
class Token:
    type: TokenType
    value: str
    pos: int
    line: int
    col: int

    def __repr__(self) -> str:
        return f"<{self.type.name}:{self.value!r}@{self.pos}>"


# ============================================================================
# Lexer
# ============================================================================

OPERATORS = {
    ">": TokenType.RIGHT,
    "<": TokenType.LEFT,
    "+": TokenType.INC,
    "-": TokenType.DEC,
    ".": TokenType.OUTPUT,
    ",": TokenType.INPUT,
    "[": TokenType.LOOP_OPEN,
    "]": TokenType.LOOP_CLOSE,
}


def tokenize(source: str) -> list[Token]:
    """Tokenize Brainfuck source into a token stream.

    Positions are character indices into ``source``; line is 1-based and
    col is 0-based within the line. Non-operator characters are dropped.
    """
    tokens: list[Token] = []
    line = 1
    line_start = 0

    for pos, ch in enumerate(source):
        if ch == "\n":
            line += 1
            line_start = pos + 1
            continue
        ttype = OPERATORS.get(ch)
        if ttype is not None:
            tokens.append(Token(ttype, ch, pos, line, pos - line_start))

    tokens.append(Token(TokenType.EOF, "", len(source), line, len(source) - line_start))
    return tokens


# ============================================================================
# AST Nodes
# ============================================================================

class ASTNode:
    """Base class for all instruction nodes."""
    pass


@dataclass(frozen=True)
class Move(ASTNode):
    delta: int  # net displacement, applied unnarrowed

@dataclass(frozen=True)
class Add(ASTNode):
    delta: int  # net increment, narrowed to 8 bits when applied

@dataclass(frozen=True)
class Output(ASTNode):
    pass

@dataclass(frozen=True)
class Input(ASTNode):
    pass

@dataclass(frozen=True)
class Loop(ASTNode):
    body: tuple[ASTNode, ...] = ()


@dataclass(frozen=True)
class Program:
    """A complete Brainfuck program: the top-level instruction sequence.

    Not an instruction itself, so it cannot appear inside a Loop body.
    """
    instructions: tuple[ASTNode, ...] = ()

    def __iter__(self) -> Iterator[ASTNode]:
        return iter(self.instructions)

    def __len__(self) -> int:
        return len(self.instructions)

    def walk(self) -> Iterator[tuple[ASTNode, int]]:
        """Yield (node, depth) in source order, descending into loops."""
        pending = [(node, 0) for node in reversed(self.instructions)]
        while pending:
            node, depth = pending.pop()
            yield node, depth
            if isinstance(node, Loop):
                pending.extend((child, depth + 1) for child in reversed(node.body))

    @property
    def node_count(self) -> int:
        return sum(1 for _ in self.walk())

    @property
    def max_depth(self) -> int:
        return max((depth + 1 for node, depth in self.walk() if isinstance(node, Loop)), default=0)


# ============================================================================
# Parser
# ============================================================================

class Parser:
    """Parses a Brainfuck token stream into a Program."""

    def __init__(self, tokens: list[Token]):
        self._tokens = tokens
        self._pos = 0

    def _peek(self) -> Token:
        return self._tokens[self._pos]

    def _advance(self) -> Token:
        tok = self._tokens[self._pos]
        self._pos += 1
        return tok

    def _at(self, ttype: TokenType) -> bool:
        return self._peek().type == ttype

    def _merge_run(self, up: TokenType, down: TokenType) -> int:
        """Consume a run of adjacent up/down tokens and return the net count.

        Only tokens at consecutive source positions belong to the run; any
        comment character in between starts a new node.
        """
        tok = self._advance()
        net = 1 if tok.type == up else -1
        while (self._at(up) or self._at(down)) and self._peek().pos == tok.pos + 1:
            tok = self._advance()
            net += 1 if tok.type == up else -1
        return net

    def parse(self) -> Program:
        """Parse a complete Brainfuck program."""
        # Each frame is an open instruction sequence and the '[' that opened it.
        # The bottom frame is the top level and has no opening token.
        stack: list[tuple[list[ASTNode], Optional[Token]]] = [([], None)]

        while not self._at(TokenType.EOF):
            tok = self._peek()
            current = stack[-1][0]

            if tok.type in (TokenType.RIGHT, TokenType.LEFT):
                current.append(Move(self._merge_run(TokenType.RIGHT, TokenType.LEFT)))
            elif tok.type in (TokenType.INC, TokenType.DEC):
                current.append(Add(self._merge_run(TokenType.INC, TokenType.DEC)))
            elif tok.type == TokenType.OUTPUT:
                self._advance()
                current.append(Output())
            elif tok.type == TokenType.INPUT:
                self._advance()
                current.append(Input())
            elif tok.type == TokenType.LOOP_OPEN:
                self._advance()
                stack.append(([], tok))
            elif tok.type == TokenType.LOOP_CLOSE:
                self._advance()
                if len(stack) == 1:
                    raise UnmatchedClosingBracket(tok.pos, tok.line, tok.col)
                body, _ = stack.pop()
                stack[-1][0].append(Loop(tuple(body)))
            else:
                raise ValueError(f"Unexpected token {tok!r}")

        if len(stack) > 1:
            # Report the outermost bracket that was never closed.
            _, opener = stack[1]
            raise UnmatchedOpeningBracket(opener.pos, opener.line, opener.col)

        return Program(tuple(stack[0][0]))


# ============================================================================
# Public API
# ============================================================================

def parse(source: str) -> Program:
    """Parse Brainfuck source code into an instruction tree.

    Args:
        source: Brainfuck program text

    Returns:
        Program containing the top-level instruction sequence

    Raises:
        UnmatchedClosingBracket: a ']' with no open loop
        UnmatchedOpeningBracket: a '[' never closed (outermost one reported)
    """
    tokens = tokenize(source)
    program = Parser(tokens).parse()
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            "parsed %d chars into %d nodes (%d top-level, depth %d)",
            len(source), program.node_count, len(program), program.max_depth,
        )
    return program


def _describe(node: ASTNode) -> str:
    if isinstance(node, Move):
        return f"Move({node.delta:+d})"
    if isinstance(node, Add):
        return f"Add({node.delta:+d})"
    if isinstance(node, Loop):
        return f"Loop[{len(node.body)}]"
    return f"{type(node).__name__}"


def render(program: Program, indent: str = "  ") -> str:
    """Pretty-print an instruction tree, one node per line."""
    return "\n".join(f"{indent * depth}{_describe(node)}" for node, depth in program.walk())
