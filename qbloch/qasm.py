from __future__ import annotations

import ast
import logging
import math
import operator
import re
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .config import MAX_QUBITS
from .errors import (
    ArityMismatch,
    DuplicateRegister,
    InvalidAngleExpression,
    InvalidRegisterSize,
    MissingRegister,
    QubitOutOfRange,
    UnknownGate,
)
from .gates import canonical_name, lookup

logger = logging.getLogger(__name__)


# -----------------------------
# Circuit representation
# -----------------------------

@dataclass(frozen=True)
class Operation:
    name: str
    qubits: Tuple[int, ...]
    params: Tuple[float, ...] = ()

    @property
    def arity(self) -> int:
        return len(self.qubits)


@dataclass(frozen=True)
class CircuitProgram:
    num_qubits: int
    ops: Tuple[Operation, ...]
    source: str = field(default="", repr=False, compare=False)


# -----------------------------
# Angle expressions
# -----------------------------

_BINARY_OPS = {
    ast.Add: operator.add,
    ast.Sub: operator.sub,
    ast.Mult: operator.mul,
    ast.Div: operator.truediv,
}
_UNARY_OPS = {
    ast.UAdd: operator.pos,
    ast.USub: operator.neg,
}
_CONSTANTS = {"pi": math.pi}


def _eval_node(node: ast.AST) -> float:
    if isinstance(node, ast.Expression):
        return _eval_node(node.body)
    if isinstance(node, ast.Constant) and type(node.value) in (int, float):
        return float(node.value)
    if isinstance(node, ast.Name) and node.id.lower() in _CONSTANTS:
        return _CONSTANTS[node.id.lower()]
    if isinstance(node, ast.BinOp) and type(node.op) in _BINARY_OPS:
        return _BINARY_OPS[type(node.op)](_eval_node(node.left), _eval_node(node.right))
    if isinstance(node, ast.UnaryOp) and type(node.op) in _UNARY_OPS:
        return _UNARY_OPS[type(node.op)](_eval_node(node.operand))
    raise ValueError(f"unsupported syntax: {type(node).__name__}")


def parse_angle(expr: str, statement: Optional[str] = None) -> float:
    """Evaluate an angle such as ``pi/2`` or ``-3*pi/4``.

    Only numeric literals, ``+ - * /``, parentheses and ``pi`` (or ``π``)
    are accepted.
    """
    src = expr.strip().replace("π", "pi")
    if not src:
        raise InvalidAngleExpression("Empty angle expression", statement)
    try:
        value = _eval_node(ast.parse(src, mode="eval"))
    except (SyntaxError, ValueError, ZeroDivisionError, RecursionError, MemoryError) as e:
        raise InvalidAngleExpression(f"Invalid angle expression '{expr.strip()}': {e}", statement) from e
    if not math.isfinite(value):
        raise InvalidAngleExpression(f"Angle '{expr.strip()}' is not finite", statement)
    return value


def _split_params(pstr: str) -> List[str]:
    return [s for s in (x.strip() for x in pstr.split(",")) if s]


# -----------------------------
# QASM parsing (subset of OpenQASM 2.0 / 3)
# -----------------------------

_IGNORED_PREFIXES = (
    "openqasm", "include", "measure", "reset", "barrier", "creg", "bit", "uint", "let",
)

_QREG_PATTERNS = (
    re.compile(r"^qreg\s+(\w+)\s*\[\s*(\d+)\s*\]$"),
    re.compile(r"^qubit\s*\[\s*(\d+)\s*\]\s+(\w+)$"),
    re.compile(r"^qubit\s+(\w+)\s*\[\s*(\d+)\s*\]$"),
)
_GATE_PATTERN = re.compile(r"^([^\s(]+)\s*(?:\((.*)\))?\s*(.*)$", re.DOTALL)
_QREF_PATTERN = re.compile(r"(\w+)\s*\[\s*(-?\d+)\s*\]")


def _strip_comments(text: str) -> str:
    lines = []
    for line in text.splitlines():
        if "//" in line:
            line = line.split("//", 1)[0]
        lines.append(line)
    return "\n".join(lines)


def _is_ignored(token: str) -> bool:
    head = token.split(None, 1)[0].lower()
    head = re.split(r"[\[(]", head, maxsplit=1)[0]
    return head in _IGNORED_PREFIXES


def _match_register(token: str) -> Optional[Tuple[str, int]]:
    m = _QREG_PATTERNS[0].match(token)
    if m:
        return m.group(1), int(m.group(2))
    m = _QREG_PATTERNS[1].match(token)
    if m:
        return m.group(2), int(m.group(1))
    m = _QREG_PATTERNS[2].match(token)
    if m:
        return m.group(1), int(m.group(2))
    return None


def split_statements(text: str) -> List[str]:
    text = _strip_comments(text)
    return [" ".join(t.split()) for t in text.split(";") if t.strip()]


def parse(text: str) -> CircuitProgram:
    """Parse circuit text into a :class:`CircuitProgram`.

    Raises a :class:`~qbloch.errors.ParseError` subclass describing the first
    offending statement.
    """
    num_qubits: Optional[int] = None
    register: Optional[str] = None
    ops: List[Operation] = []

    for token in split_statements(text):
        reg = _match_register(token)
        if reg:
            if num_qubits is not None:
                raise DuplicateRegister("Quantum register declared more than once", token)
            register, num_qubits = reg
            if not 1 <= num_qubits <= MAX_QUBITS:
                raise InvalidRegisterSize(
                    f"Register size must be between 1 and {MAX_QUBITS}, got {num_qubits}", token
                )
            logger.debug("register %s[%d]", register, num_qubits)
            continue

        if _is_ignored(token):
            continue

        m = _GATE_PATTERN.match(token)
        if m is None:
            raise UnknownGate("Unrecognised statement", token)
        raw_name, pstr, arg_str = m.group(1), m.group(2), m.group(3)
        name = canonical_name(raw_name)

        if num_qubits is None:
            raise MissingRegister("qreg/qubit must be declared before gates", token, name)

        spec = lookup(name)
        if spec is None:
            raise UnknownGate(f"Unknown gate: {raw_name}", token, raw_name)

        params = tuple(parse_angle(x, token) for x in _split_params(pstr or ""))

        qubits: List[int] = []
        for ref in _QREF_PATTERN.finditer(arg_str):
            if ref.group(1) != register:
                raise QubitOutOfRange(f"Unknown register '{ref.group(1)}'", token, name)
            qubits.append(int(ref.group(2)))

        if any(q < 0 or q >= num_qubits for q in qubits):
            raise QubitOutOfRange(
                f"Qubit index out of range for register {register}[{num_qubits}]", token, name
            )
        if len(qubits) != spec.num_qubits or len(params) != spec.num_params:
            raise ArityMismatch(
                f"Gate {name} expects {spec.num_params} parameter(s) and {spec.num_qubits} qubit(s), "
                f"got {len(params)} and {len(qubits)}",
                token,
                name,
            )
        if len(set(qubits)) != len(qubits):
            raise ArityMismatch(f"Gate {name} expects distinct qubits", token, name)

        op = Operation(name, tuple(qubits), params)
        logger.debug("parsed %s", op)
        ops.append(op)

    if num_qubits is None:
        raise MissingRegister("No qreg/qubit declaration found")

    logger.info("parsed circuit with %d qubit(s) and %d operation(s)", num_qubits, len(ops))
    return CircuitProgram(num_qubits=num_qubits, ops=tuple(ops), source=text)


def to_qasm2(program: CircuitProgram) -> str:
    """Render a program back as OpenQASM 2.0 text."""
    lines = ['OPENQASM 2.0;', 'include "qelib1.inc";', f"qreg q[{program.num_qubits}];"]
    for op in program.ops:
        head = "u3" if op.name == "u" else op.name
        if op.params:
            head += "(" + ",".join(repr(float(x)) for x in op.params) + ")"
        lines.append(head + " " + ",".join(f"q[{q}]" for q in op.qubits) + ";")
    return "\n".join(lines) + "\n"
