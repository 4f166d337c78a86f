"""JSON serialization/deserialization for the Ling AST.

This module converts between Ling AST dataclasses and plain Python
dict/list structures suitable for JSON encoding. Every node becomes a
dict tagged with `"type"` (the node class name) plus one entry per
dataclass field; tokens are tagged with `"__type__": "Token"`. Loading
builds fresh node objects, so a loaded program must be resolved again
before it runs.
"""

from __future__ import annotations

from dataclasses import fields
from typing import Any, Dict, Type

from . import ast as nodes
from .lexer import Token

NODE_TYPES: Dict[str, Type[nodes.Node]] = {
    cls.__name__: cls
    for cls in (
        nodes.Program,
        nodes.Assign, nodes.BinaryOp, nodes.Call, nodes.Get, nodes.Grouping,
        nodes.Literal, nodes.Logical, nodes.Set, nodes.Super, nodes.This,
        nodes.UnaryOp, nodes.Variable,
        nodes.Block, nodes.BreakStmt, nodes.ContinueStmt, nodes.ExprStmt,
        nodes.FuncDecl, nodes.ClassDecl, nodes.IfStmt, nodes.PrintStmt,
        nodes.ReturnStmt, nodes.VarDecl, nodes.WhileStmt,
    )
}


def token_to_obj(token: Token) -> Dict[str, Any]:
    return {
        "__type__": "Token",
        "type": token.type,
        "lexeme": token.lexeme,
        "literal": token.literal,
        "line": token.line,
    }


def token_from_obj(o: Dict[str, Any]) -> Token:
    return Token(o["type"], o["lexeme"], o.get("literal"), int(o["line"]))


def ast_to_obj(node: Any) -> Any:
    # Primitives
    if node is None or isinstance(node, (bool, float, str)):
        return node
    if isinstance(node, list):
        return [ast_to_obj(n) for n in node]
    if isinstance(node, Token):
        return token_to_obj(node)
    if isinstance(node, nodes.Node) and type(node).__name__ in NODE_TYPES:
        obj: Dict[str, Any] = {"type": type(node).__name__}
        for f in fields(node):
            obj[f.name] = ast_to_obj(getattr(node, f.name))
        return obj
    raise TypeError(f"Unsupported node for serialization: {type(node).__name__}")


def ast_from_obj(obj: Any) -> Any:
    if obj is None or isinstance(obj, (bool, str)):
        return obj
    if isinstance(obj, (int, float)):
        # JSON may drop the fraction of a whole number; Ling numbers are floats
        return float(obj)
    if isinstance(obj, list):
        return [ast_from_obj(o) for o in obj]
    if not isinstance(obj, dict):
        raise TypeError("Invalid AST object")
    if obj.get("__type__") == "Token":
        return token_from_obj(obj)
    t = obj.get("type")
    cls = NODE_TYPES.get(t)
    if cls is None:
        raise ValueError(f"Unknown AST node type: {t}")
    kwargs = {f.name: ast_from_obj(obj[f.name]) for f in fields(cls) if f.name in obj}
    return cls(**kwargs)
