from __future__ import annotations

import pytest

from pyret import ErrorKind, Interner, ParseError, Span, expr_to_jsonable, parse
from pyret import ast as A


def shape(src: str) -> object:
    return expr_to_jsonable(parse(src), spans=False)


def num(n: int) -> dict[str, object]:
    return {"node": "Literal", "kind": "num", "value": n}


def binary(op: str, left: object, right: object) -> dict[str, object]:
    return {"node": "Binary", "op": op, "left": left, "right": right}


def test_multiplication_binds_tighter_than_addition() -> None:
    assert shape("1 + 2 * 3") == binary("+", num(1), binary("*", num(2), num(3)))


def test_binary_tiers_are_left_associative() -> None:
    assert shape("8 - 3 - 2") == binary("-", binary("-", num(8), num(3)), num(2))
    assert shape("8 / 4 * 2") == binary("*", binary("/", num(8), num(4)), num(2))


def test_equality_chains_left() -> None:
    expr = parse("2 == 2 == true")
    assert isinstance(expr, A.Binary)
    assert expr.op is A.BinOp.EQ
    assert isinstance(expr.left, A.Binary) and expr.left.op is A.BinOp.EQ
    assert expr.right == A.Literal(span=Span(10, 14), kind="bool", value=True)


def test_comparison_sits_between_equality_and_addition() -> None:
    assert shape("1 + 1 < 3 == true") == binary(
        "==",
        binary("<", binary("+", num(1), num(1)), num(3)),
        {"node": "Literal", "kind": "bool", "value": True},
    )


def test_grouping_and_spans() -> None:
    expr = parse("(1 + 2) * 3")
    assert isinstance(expr, A.Binary)
    assert isinstance(expr.left, A.Grouping)
    assert expr.left.span == Span(0, 7)
    assert expr.span == Span(0, 11)


def test_unary_minus_applies_to_primary() -> None:
    expr = parse("-2 * 3")
    assert isinstance(expr, A.Binary)
    assert expr.left == A.Unary(span=Span(0, 2), op=A.UnOp.NEG, operand=A.Literal(span=Span(1, 2), kind="num", value=2))


def test_double_negation_is_rejected() -> None:
    with pytest.raises(ParseError) as e:
        parse("--1")
    assert e.value.kind is ErrorKind.EXPECTED_BUT_FOUND
    assert e.value.found == "'-'"


def test_if_expression() -> None:
    expr = parse("if 1 < 2 { 10 } else { 20 }")
    assert isinstance(expr, A.If)
    assert expr.span == Span(0, 27)
    assert isinstance(expr.cond, A.Binary)
    assert expr.then == A.Literal(span=Span(11, 13), kind="num", value=10)
    assert expr.else_ == A.Literal(span=Span(23, 25), kind="num", value=20)


def test_if_requires_else() -> None:
    with pytest.raises(ParseError) as e:
        parse("if true { 1 }")
    assert e.value.kind is ErrorKind.EXPECTED_BUT_FOUND
    assert e.value.expected == "'else'"
    assert e.value.found == "end of input"
    assert e.value.span == Span(13, 13)


def test_if_branch_is_a_single_expression() -> None:
    with pytest.raises(ParseError) as e:
        parse("if true { 1; 2 } else { 3 }")
    assert "expected '}', found ';'" in str(e.value)


def test_unterminated_grouping() -> None:
    with pytest.raises(ParseError) as e:
        parse("(1 + 2")
    assert e.value.expected == "')'"
    assert e.value.span == Span(6, 6)


def test_unterminated_block() -> None:
    for src in ("{ 1", "{ 1;", "{ let x = 1;"):
        with pytest.raises(ParseError) as e:
            parse(src)
        assert e.value.kind is ErrorKind.EXPECTED_BUT_FOUND
        assert "'}'" in e.value.expected


def test_missing_operand() -> None:
    with pytest.raises(ParseError) as e:
        parse("1 +")
    assert str(e.value) == "3..3: expected expression, found end of input"


def test_trailing_tokens_are_rejected() -> None:
    with pytest.raises(ParseError) as e:
        parse("1 2")
    assert e.value.expected == "end of input"
    assert e.value.found == "number"


def test_number_literal_range() -> None:
    assert parse("2147483647") == A.Literal(span=Span(0, 10), kind="num", value=2**31 - 1)
    with pytest.raises(ParseError) as e:
        parse("2147483648")
    assert e.value.kind is ErrorKind.INVALID_NUMBER


def test_block_statements() -> None:
    interner = Interner()
    expr = parse("{ let x: i32 = 1; let y; x = 2; 3; 4 }", interner=interner)
    assert isinstance(expr, A.BlockExpr)
    stmts = expr.block.stmts
    assert [type(s).__name__ for s in stmts] == ["Let", "Let", "Assign", "ExprStmt", "ExprWithoutSemi"]

    let_x, let_y, assign, _, tail = stmts
    assert interner.lookup(let_x.ident) == "x"
    assert interner.lookup(let_x.type) == "i32"
    assert let_x.init == A.Literal(span=Span(15, 16), kind="num", value=1)
    assert let_y.type is None and let_y.init is None
    assert assign.ident == let_x.ident
    assert tail.span == Span(35, 36)
    assert expr.span == expr.block.span == Span(0, 38)


def test_empty_block() -> None:
    expr = parse("{}")
    assert expr == A.BlockExpr(span=Span(0, 2), block=A.Block(span=Span(0, 2), stmts=()))


def test_fn_and_return_are_not_implemented() -> None:
    for src in ("{ fn }", "{ return 1; }"):
        with pytest.raises(ParseError) as e:
            parse(src)
        assert e.value.kind is ErrorKind.UNIMPLEMENTED_FEATURE
        assert e.value.feature == src.split()[1]
        assert e.value.expected is None


def test_nesting_depth_is_bounded() -> None:
    assert isinstance(parse("(" * 10 + "1" + ")" * 10, max_depth=10), A.Grouping)
    with pytest.raises(ParseError) as e:
        parse("(" * 11 + "1" + ")" * 11, max_depth=10)
    assert e.value.kind is ErrorKind.NESTING_TOO_DEEP


def test_deep_nesting_fails_cleanly_with_default_limit() -> None:
    with pytest.raises(ParseError) as e:
        parse("(" * 5000 + "1" + ")" * 5000)
    assert e.value.kind is ErrorKind.NESTING_TOO_DEEP


def test_long_operator_chains_do_not_recurse() -> None:
    expr = parse(" + ".join(["1"] * 2000))
    assert isinstance(expr, A.Binary)
    assert expr.span == Span(0, 2000 * 4 - 3)
