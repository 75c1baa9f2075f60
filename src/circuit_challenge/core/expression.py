"""
Text format of cell expressions: "<a> <op> <b>".

Renderers match on this format, so display symbols are the unicode
operators (+ − × ÷). Parsing also accepts ASCII equivalents.
"""

import re
from dataclasses import dataclass
from typing import Optional, Tuple

from .puzzle import Operation


# ASCII and lookalike spellings -> canonical operation
_SYMBOLS = {
    '+': Operation.ADDITION,
    '−': Operation.SUBTRACTION,
    '-': Operation.SUBTRACTION,
    '×': Operation.MULTIPLICATION,
    '*': Operation.MULTIPLICATION,
    'x': Operation.MULTIPLICATION,
    '÷': Operation.DIVISION,
    '/': Operation.DIVISION,
}

_EXPRESSION_RE = re.compile(r'^(\d+)\s*([+\-−×*x÷/])\s*(\d+)$')

# Labels that are never arithmetic
_LABELS = {'START', 'FINISH'}


@dataclass(frozen=True)
class Expression:
    """A generated arithmetic expression"""
    text: str
    operation: Operation
    operand_a: int
    operand_b: int
    result: int


def format_expression(a: int, operation: Operation, b: int) -> str:
    return f"{a} {operation.symbol} {b}"


def make_expression(a: int, operation: Operation, b: int, result: int) -> Expression:
    return Expression(format_expression(a, operation, b), operation, int(a), int(b), int(result))


def parse_expression(text: str) -> Optional[Tuple[int, Operation, int]]:
    """Split expression text into (a, operation, b), or None if unparsable"""
    if not text:
        return None
    text = text.strip()
    if text in _LABELS:
        return None
    match = _EXPRESSION_RE.match(text)
    if not match:
        return None
    return int(match.group(1)), _SYMBOLS[match.group(2)], int(match.group(3))


def evaluate_expression(text: str) -> Optional[int]:
    """
    Evaluate expression text.

    Returns None for labels, empty or unparsable text, division by zero
    and divisions that do not come out whole.
    """
    parsed = parse_expression(text)
    if parsed is None:
        return None
    a, operation, b = parsed

    if operation is Operation.ADDITION:
        return a + b
    if operation is Operation.SUBTRACTION:
        return a - b
    if operation is Operation.MULTIPLICATION:
        return a * b
    if b == 0 or a % b != 0:
        return None
    return a // b
