## cardlang — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import re

from .cards import Card
from .types import ObjectView
from .nodes import (
    Symbol, Number, Bool, Comparison, And, FunctionCall,
    Declaration, Definition, Transfer, IfStatement, CheckStatement, ReturnStatement,
)


def write_without_ansi(write_fn):
    """Wrapper function that strips ANSI codes before calling the original writer."""
    ansi_re = re.compile(r'\033\[[0-9;]*m')
    return lambda text: write_fn(ansi_re.sub('', text))


def format_number(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)

def format_stack(cards: list[Card]) -> str:
    return ', '.join(str(c) for c in cards)

def format_value(value) -> str:
    if isinstance(value, bool): return str(value).lower()
    if isinstance(value, float): return format_number(value)
    if isinstance(value, list): return '[' + format_stack(value) + ']'
    if isinstance(value, ObjectView):
        return '{' + ', '.join(f"{k}: {format_value(v)}" for k, v in value.attributes.items()) + '}'
    return str(value)


def format_expression(expr) -> str:
    match expr:
        case Symbol(name=name): return name
        case Number(value=value): return format_number(value)
        case Bool(value=value): return str(value).lower()
        case Comparison(left=left, right=right): return f"{format_expression(left)} is {format_expression(right)}"
        case And(left=left, right=right): return f"{format_expression(left)} & {format_expression(right)}"
        case FunctionCall(name=name, arguments=args): return f"{name}({', '.join(format_expression(a) for a in args)})"
    return repr(expr)

def format_statement(stmt) -> str:
    """Render a statement back to one line of source, with blocks abbreviated."""
    match stmt:
        case Declaration(key=key, value=value): return f"{key.value} {format_expression(value)}"
        case Definition(name=name, arguments=args, body=body): return f"define {name}({' '.join(args)}) {{ …{len(body)} }}"
        case Transfer(source=source, target=target, count=count):
            return f"{source} > {target}" + (f" {count.value}" if count is not None else "")
        case FunctionCall(): return format_expression(stmt)
        case IfStatement(expression=expr, body=body): return f"if ({format_expression(expr)}) {{ …{len(body)} }}"
        case CheckStatement(expression=expr): return f"check({format_expression(expr)})"
        case ReturnStatement(expression=expr): return f"return({format_expression(expr)})"
    return repr(stmt)
