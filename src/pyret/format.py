from __future__ import annotations

from . import ast as A
from .symbol import Interner, Symbol


_PRECEDENCE: dict[A.BinOp, int] = {
    A.BinOp.EQ: 1,
    A.BinOp.NE: 1,
    A.BinOp.GT: 2,
    A.BinOp.GE: 2,
    A.BinOp.LT: 2,
    A.BinOp.LE: 2,
    A.BinOp.ADD: 3,
    A.BinOp.SUB: 3,
    A.BinOp.MUL: 4,
    A.BinOp.DIV: 4,
}
_ATOM = 5


def format_expr(expr: A.Expr, interner: Interner | None = None) -> str:
    """Render ``expr`` as canonical source text.

    Parsing the output of a parsed tree yields the same tree (spans aside).
    Parentheses are only inserted for hand-built trees that need them.
    """
    return _format(expr, interner)


def _format(e: A.Expr, interner: Interner | None) -> str:
    if isinstance(e, A.Literal):
        if e.kind == "bool":
            return "true" if e.value else "false"
        return str(e.value)
    if isinstance(e, A.Unary):
        inner = _format(e.operand, interner)
        if _prec(e.operand) < _ATOM or isinstance(e.operand, A.Unary):
            inner = f"({inner})"
        return f"{e.op.value}{inner}"
    if isinstance(e, A.Binary):
        # Walk the left spine in a loop; operator chains can be arbitrarily long.
        spine = [e]
        while isinstance(spine[-1].left, A.Binary):
            spine.append(spine[-1].left)
        out = _format(spine[-1].left, interner)
        out_prec = _prec(spine[-1].left)
        for node in reversed(spine):
            p = _PRECEDENCE[node.op]
            if out_prec < p:
                out = f"({out})"
            right = _format(node.right, interner)
            if _prec(node.right) <= p:
                right = f"({right})"
            out = f"{out} {node.op.value} {right}"
            out_prec = p
        return out
    if isinstance(e, A.Grouping):
        return f"({_format(e.expr, interner)})"
    if isinstance(e, A.If):
        cond = _format(e.cond, interner)
        then = _format(e.then, interner)
        else_ = _format(e.else_, interner)
        return f"if {cond} {{ {then} }} else {{ {else_} }}"
    if isinstance(e, A.BlockExpr):
        if not e.block.stmts:
            return "{}"
        body = " ".join(_format_stmt(s, interner) for s in e.block.stmts)
        return f"{{ {body} }}"
    raise TypeError(f"not an expression node: {type(e)!r}")


def _prec(e: A.Expr) -> int:
    if isinstance(e, A.Binary):
        return _PRECEDENCE[e.op]
    if isinstance(e, A.If):
        return 0
    return _ATOM


def _format_stmt(s: A.Stmt, interner: Interner | None) -> str:
    if isinstance(s, A.Let):
        out = f"let {_name(s.ident, interner)}"
        if s.type is not None:
            out += f": {_name(s.type, interner)}"
        if s.init is not None:
            out += f" = {_format(s.init, interner)}"
        return out + ";"
    if isinstance(s, A.Assign):
        return f"{_name(s.ident, interner)} = {_format(s.value, interner)};"
    if isinstance(s, A.ExprStmt):
        return _format(s.expr, interner) + ";"
    if isinstance(s, A.ExprWithoutSemi):
        return _format(s.expr, interner)
    raise TypeError(f"not a statement node: {type(s)!r}")


def _name(sym: Symbol, interner: Interner | None) -> str:
    if interner is None:
        return f"<{sym.id}>"
    return interner.lookup(sym)


# ---- Structural dump ----


def dump_expr(expr: A.Expr, interner: Interner | None = None) -> str:
    """Indented, one node per line tree dump with spans."""
    out: list[str] = []
    # Explicit stack: left-deep operator chains would exhaust the call stack.
    stack: list[tuple[A.Node, int]] = [(expr, 0)]
    while stack:
        node, indent = stack.pop()
        line, children = _dump_node(node, interner)
        out.append(f"{'  ' * indent}{line} @{node.span.format()}")
        stack.extend((child, indent + 1) for child in reversed(children))
    return "\n".join(out)


def _dump_node(node: A.Node, interner: Interner | None) -> tuple[str, tuple[A.Node, ...]]:
    if isinstance(node, A.Literal):
        return f"Literal {_format(node, interner)}", ()
    if isinstance(node, A.Unary):
        return f"Unary {node.op.value}", (node.operand,)
    if isinstance(node, A.Binary):
        return f"Binary {node.op.value}", (node.left, node.right)
    if isinstance(node, A.Grouping):
        return "Grouping", (node.expr,)
    if isinstance(node, A.If):
        return "If", (node.cond, node.then, node.else_)
    if isinstance(node, A.BlockExpr):
        return "Block", node.block.stmts
    if isinstance(node, A.Let):
        head = f"Let {_name(node.ident, interner)}"
        if node.type is not None:
            head += f": {_name(node.type, interner)}"
        return head, (() if node.init is None else (node.init,))
    if isinstance(node, A.Assign):
        return f"Assign {_name(node.ident, interner)}", (node.value,)
    if isinstance(node, (A.ExprStmt, A.ExprWithoutSemi)):
        return type(node).__name__, (node.expr,)
    raise TypeError(f"not an AST node: {type(node)!r}")


def expr_to_jsonable(node: object, interner: Interner | None = None, *, spans: bool = True) -> object:
    """Convert an AST to plain dicts/lists, tagging each node with its class name."""
    root: dict[object, object] = {}
    # (value, container, key): each value is converted and stored at container[key].
    stack: list[tuple[object, dict | list, object]] = [(node, root, None)]
    while stack:
        value, container, key = stack.pop()
        if isinstance(value, A.Node):
            out: dict[str, object] = {"node": type(value).__name__}
            for name in value.__dataclass_fields__:
                if name == "span":
                    if spans:
                        out["span"] = [value.span.lo, value.span.hi]
                    continue
                out[name] = None
                stack.append((getattr(value, name), out, name))
            container[key] = out
        elif isinstance(value, tuple):
            items: list[object] = [None] * len(value)
            stack.extend((x, items, i) for i, x in enumerate(value))
            container[key] = items
        elif isinstance(value, Symbol):
            container[key] = _name(value, interner)
        elif isinstance(value, (A.BinOp, A.UnOp)):
            container[key] = value.value
        else:
            container[key] = value
    return root[None]
