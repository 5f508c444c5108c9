"""
Compiler tests

1. Lexer (operator tokens, comment stripping, positions)
2. Run-length merging of moves and adds
3. Loop nesting
4. Bracket errors and their reported positions
5. Tree rendering and metrics
"""

from __future__ import annotations

import pytest

from bfrunner.compiler import (
    ASTNode,
    Add,
    Input,
    Loop,
    Move,
    Output,
    Program,
    TokenType,
    parse,
    render,
    tokenize,
)
from bfrunner.errors import ParseError, UnmatchedClosingBracket, UnmatchedOpeningBracket


# --- Lexer ---

def test_tokenize_keeps_only_operators() -> None:
    tokens = tokenize("a+b [c] .,\n<>")
    types = [t.type for t in tokens]
    assert types == [
        TokenType.INC,
        TokenType.LOOP_OPEN,
        TokenType.LOOP_CLOSE,
        TokenType.OUTPUT,
        TokenType.INPUT,
        TokenType.LEFT,
        TokenType.RIGHT,
        TokenType.EOF,
    ]


def test_tokenize_tracks_position_line_and_column() -> None:
    tokens = tokenize("ab\n  +")
    plus = tokens[0]
    assert plus.pos == 5
    assert plus.line == 2
    assert plus.col == 2


# --- Run-length merging ---

def test_empty_source_is_empty_program() -> None:
    program = parse("")
    assert program == Program(())
    assert len(program) == 0


def test_comment_only_source_is_empty_program() -> None:
    assert parse("hello world, this is text").instructions == (Input(),)
    assert parse("no operators here") == Program(())


@pytest.mark.parametrize("n", [1, 2, 7, 300, 30000])
def test_same_direction_moves_merge_into_one_node(n: int) -> None:
    assert parse(">" * n).instructions == (Move(n),)
    assert parse("<" * n).instructions == (Move(-n),)


def test_opposite_moves_cancel() -> None:
    assert parse(">>><").instructions == (Move(2),)
    assert parse("<<>").instructions == (Move(-1),)


def test_zero_net_move_is_kept() -> None:
    assert parse("><").instructions == (Move(0),)
    assert parse("+-").instructions == (Add(0),)


def test_adds_accumulate_without_narrowing() -> None:
    assert parse("+" * 1000).instructions == (Add(1000),)
    assert parse("-" * 5000).instructions == (Add(-5000),)


def test_comment_characters_end_a_run() -> None:
    assert parse("+ +").instructions == (Add(1), Add(1))
    assert parse("+ a + b +").instructions == (Add(1), Add(1), Add(1))
    assert parse("> x\n>").instructions == (Move(1), Move(1))
    assert parse("< >").instructions == (Move(-1), Move(1))


def test_run_spans_only_adjacent_operators() -> None:
    assert parse("++-x>><").instructions == (Add(1), Move(1))
    assert parse("+++\n--").instructions == (Add(3), Add(-2))


def test_moves_and_adds_do_not_merge_with_each_other() -> None:
    assert parse("+>+<").instructions == (Add(1), Move(1), Add(1), Move(-1))


def test_io_operators_are_not_merged() -> None:
    assert parse("..,,").instructions == (Output(), Output(), Input(), Input())


# --- Loops ---

def test_simple_loop() -> None:
    assert parse("[-]").instructions == (Loop((Add(-1),)),)


def test_empty_loop() -> None:
    assert parse("[]").instructions == (Loop(()),)


def test_nested_loops() -> None:
    program = parse("+[>[-]<-].")
    assert program.instructions == (
        Add(1),
        Loop((Move(1), Loop((Add(-1),)), Move(-1), Add(-1))),
        Output(),
    )


def test_parse_is_deterministic(hello_world: str) -> None:
    assert parse(hello_world) == parse(hello_world)


def test_source_without_brackets_never_fails() -> None:
    source = "".join(chr(c) for c in range(32, 127) if chr(c) not in "[]") * 3
    program = parse(source)
    assert all(not isinstance(node, Loop) for node in program)


def test_deep_nesting_parses_iteratively() -> None:
    depth = 5000
    program = parse("[" * depth + "]" * depth)
    assert program.max_depth == depth
    assert program.node_count == depth


# --- Bracket errors ---

def test_lone_closing_bracket() -> None:
    with pytest.raises(UnmatchedClosingBracket) as exc:
        parse("]")
    assert exc.value.pos == 0
    assert "position 0" in str(exc.value)


def test_lone_opening_bracket() -> None:
    with pytest.raises(UnmatchedOpeningBracket) as exc:
        parse("[")
    assert exc.value.pos == 0
    assert "opened at position 0" in str(exc.value)


def test_closing_bracket_position_after_balanced_code() -> None:
    with pytest.raises(UnmatchedClosingBracket) as exc:
        parse("+[-]]")
    assert exc.value.pos == 4


def test_unmatched_opening_reports_outermost() -> None:
    with pytest.raises(UnmatchedOpeningBracket) as exc:
        parse("[[]")
    assert exc.value.pos == 0

    with pytest.raises(UnmatchedOpeningBracket) as exc:
        parse("+[>[[-]")
    assert exc.value.pos == 1


def test_parse_errors_carry_line_and_column() -> None:
    with pytest.raises(ParseError) as exc:
        parse("+++\n  ++ ]")
    err = exc.value
    assert isinstance(err, UnmatchedClosingBracket)
    assert err.pos == 9
    assert err.line == 2
    assert err.col == 5
    assert err.location == "line 2, col 5"


def test_positions_count_characters_not_bytes() -> None:
    with pytest.raises(UnmatchedClosingBracket) as exc:
        parse("é]")
    assert exc.value.pos == 1

    with pytest.raises(UnmatchedOpeningBracket) as exc:
        parse("日本[")
    assert exc.value.pos == 2


# --- Rendering ---

def test_render_indents_loop_bodies() -> None:
    text = render(parse("++[>+<-]."))
    assert text.splitlines() == [
        "Add(+2)",
        "Loop[4]",
        "  Move(+1)",
        "  Add(+1)",
        "  Move(-1)",
        "  Add(-1)",
        "Output",
    ]


def test_program_metrics(hello_world: str) -> None:
    program = parse(hello_world)
    assert program.max_depth == 2
    assert program.node_count > len(program)


def test_program_is_not_an_instruction() -> None:
    program = parse("+.")
    assert not isinstance(program, ASTNode)
    assert all(isinstance(node, ASTNode) for node in program)
