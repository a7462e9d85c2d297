"""
Python Code Generation Pass.

`PythonCodeGenerator` is a traversal client that synthesises target dialect
text bottom-up: every ``leave_<Kind>`` hook writes ``node.text`` from the
already rendered children and the current indentation.

Text layout invariant:
    A statement's text has an unindented first line; any further lines carry
    their absolute indentation. The enclosing block prefixes the first line.

Indentation is an explicit stack owned by the generator. Block-shaped kinds
(``BlockStatement``, ``ClassBody``, ``ObjectExpression``) push on ``enter`` and
pop on ``leave``. A bare block standing as a statement in a program or another
block does not open a level: Python has no block scope, so its statements are
emitted in line with their siblings.

Constructs without a target equivalent render the `UNTRANSLATABLE` sentinel and
append a reason to `PythonCodeGenerator.untranslatable`; generation never
aborts because of them.
"""

from typing import List, Optional, Set

from espy.core.nodes import (
  BINARY_SHAPED_KINDS,
  ForStatement,
  Identifier,
  Literal,
  Node,
  NodeKind,
  WILDCARD_PREFIX,
)
from espy.core.traversal import Visitor

UNTRANSLATABLE = "??"
DEFAULT_INDENT = "  "
INITIALIZER_NAME = "__init__"
SELF_NAME = "self"
NULL_LITERAL = "None"
EMPTY_MAPPING = "{}"
NO_OP = "pass"

UNARY_OPERATORS = {
  "delete": "del ",
  "void": None,
  "typeof": None,
  "+": "+",
  "-": "-",
  "~": "~",
  "!": "not ",
}

BINARY_OPERATORS = {
  "===": "==",
  "!==": "!=",
  ">>>": None,
}

LOGICAL_OPERATORS = {
  "&&": "and",
  "||": "or",
}


class IndentStack:
  """
  Nesting depth register for the generation pass.

  Attributes:
      unit: The whitespace emitted per level.
  """

  def __init__(self, unit: str = DEFAULT_INDENT):
    self.unit = unit
    self._depth = 0

  @property
  def depth(self) -> int:
    return self._depth

  @property
  def current(self) -> str:
    return self.unit * self._depth

  @property
  def deeper(self) -> str:
    return self.unit * (self._depth + 1)

  def push(self) -> None:
    self._depth += 1

  def pop(self) -> None:
    if self._depth == 0:
      raise RuntimeError("Indentation stack underflow")
    self._depth -= 1


def is_counting_loop(node: ForStatement) -> bool:
  """
  Recognises ``for (v = low; v < high; v++)`` shaped loops.

  The initializer declares exactly one variable with a value, the test is a
  ``<`` comparison with that variable on the left, and the update adds one to
  it (``v++``, ``++v`` or ``v += 1``).
  """
  init, test, update = node.init, node.test, node.update
  if init is None or init.kind != NodeKind.VARIABLE_DECLARATION or len(init.declarations) != 1:
    return False
  declarator = init.declarations[0]
  if not isinstance(declarator.id, Identifier) or declarator.init is None:
    return False
  var = declarator.id.name

  if test is None or test.kind != NodeKind.BINARY_EXPRESSION or test.operator != "<":
    return False
  if not _is_name(test.left, var):
    return False

  if update is None:
    return False
  if update.kind == NodeKind.UPDATE_EXPRESSION:
    return update.operator == "++" and _is_name(update.argument, var)
  if update.kind == NodeKind.ASSIGNMENT_EXPRESSION:
    return update.operator == "+=" and _is_name(update.left, var) and _is_one(update.right)
  return False


def _is_name(node: Optional[Node], name: str) -> bool:
  return isinstance(node, Identifier) and node.name == name


def _is_one(node: Node) -> bool:
  if not isinstance(node, Literal) or isinstance(node.value, bool):
    return False
  return isinstance(node.value, (int, float)) and node.value == 1


def _is_negation(node: Node) -> bool:
  return node.kind == NodeKind.UNARY_EXPRESSION and node.operator == "!"


def _nested(node: Node) -> str:
  # Conditional test or consequent that would otherwise absorb the outer keywords
  if node.kind in (NodeKind.CONDITIONAL_EXPRESSION, NodeKind.ARROW_FUNCTION_EXPRESSION):
    return f"({node.text})"
  return node.text


class PythonCodeGenerator(Visitor):
  """
  Renders a tree as Python source.

  After `espy.core.traversal.traverse` completes, the root's ``text`` holds the
  full program.

  Attributes:
      untranslatable: Reasons for every sentinel emitted during the pass.
  """

  def __init__(self, indent_unit: str = DEFAULT_INDENT):
    self.indent = IndentStack(indent_unit)
    self.untranslatable: List[str] = []
    self._bare_blocks: Set[int] = set()

  def _sentinel(self, reason: str) -> str:
    self.untranslatable.append(reason)
    return UNTRANSLATABLE

  @staticmethod
  def _operand(node: Node) -> str:
    if node.kind in BINARY_SHAPED_KINDS or _is_negation(node):
      return f"({node.text})"
    return node.text

  @staticmethod
  def _join(nodes: List[Optional[Node]]) -> str:
    return ", ".join(NULL_LITERAL if n is None else n.text for n in nodes)

  # --- Leaves ---

  def leave_Identifier(self, node: Node) -> None:
    node.text = node.name

  def leave_Literal(self, node: Node) -> None:
    # Raw spelling keeps numeric precision intact
    node.text = NULL_LITERAL if node.value is None else node.raw

  def leave_ThisExpression(self, node: Node) -> None:
    node.text = SELF_NAME

  def leave_Super(self, node: Node) -> None:
    node.text = "super()"

  def leave_Wildcard(self, node: Node) -> None:
    node.text = f"{WILDCARD_PREFIX}{node.capture}"

  def leave_Unsupported(self, node: Node) -> None:
    node.text = self._sentinel(f"unsupported construct {node.source_type}") + node.source_type

  def leave_TemplateElement(self, node: Node) -> None:
    node.text = node.raw.replace("\\`", "`") if node.cooked is None else node.cooked

  def leave_TemplateLiteral(self, node: Node) -> None:
    chunks = [q.text for q in node.quasis]
    if not node.expressions:
      node.text = repr("".join(chunks))
      return
    fmt = "%s".join(chunk.replace("%", "%%") for chunk in chunks)
    node.text = f"{fmt!r} % ({self._join(node.expressions)},)"

  # --- Operators ---

  def leave_UnaryExpression(self, node: Node) -> None:
    spelling = UNARY_OPERATORS.get(node.operator)
    if spelling is None:
      spelling = self._sentinel(f"unary operator {node.operator!r}")
    node.text = f"{spelling}{self._operand(node.argument)}"

  def leave_UpdateExpression(self, node: Node) -> None:
    op = "+=" if node.operator == "++" else "-="
    node.text = f"{node.argument.text} {op} 1"

  def leave_BinaryExpression(self, node: Node) -> None:
    left = self._operand(node.left)
    right = self._operand(node.right)
    if node.operator == "instanceof":
      node.text = f"isinstance({left}, {right})"
      return
    operator = BINARY_OPERATORS.get(node.operator, node.operator)
    if operator is None:
      operator = self._sentinel(f"binary operator {node.operator!r}")
    node.text = f"{left} {operator} {right}"

  def leave_LogicalExpression(self, node: Node) -> None:
    operator = LOGICAL_OPERATORS.get(node.operator)
    if operator is None:
      operator = self._sentinel(f"logical operator {node.operator!r}")
    node.text = f"{self._operand(node.left)} {operator} {self._operand(node.right)}"

  def leave_AssignmentExpression(self, node: Node) -> None:
    node.text = f"{node.left.text} {node.operator} {node.right.text}"

  def leave_ConditionalExpression(self, node: Node) -> None:
    node.text = f"{_nested(node.consequent)} if {_nested(node.test)} else {node.alternate.text}"

  # --- Access & Calls ---

  def leave_MemberExpression(self, node: Node) -> None:
    if node.computed:
      node.text = f"{node.object.text}[{node.property.text}]"
    else:
      node.text = f"{node.object.text}.{node.property.text}"

  def _render_call(self, node: Node) -> str:
    callee = node.callee.text
    if node.callee.kind == NodeKind.SUPER:
      callee = f"{callee}.{INITIALIZER_NAME}"
    return f"{callee}({self._join(node.arguments)})"

  def leave_CallExpression(self, node: Node) -> None:
    node.text = self._render_call(node)

  def leave_NewExpression(self, node: Node) -> None:
    node.text = self._render_call(node)

  def leave_ArrowFunctionExpression(self, node: Node) -> None:
    params = self._join(node.params)
    node.text = f"lambda {params}: {node.body.text}" if params else f"lambda: {node.body.text}"

  # --- Literals with structure ---

  def leave_ArrayExpression(self, node: Node) -> None:
    node.text = f"[{self._join(node.elements)}]"

  def leave_ArrayPattern(self, node: Node) -> None:
    node.text = f"[{self._join(node.elements)}]"

  def leave_AssignmentPattern(self, node: Node) -> None:
    node.text = f"{node.left.text} = {node.right.text}"

  def leave_Property(self, node: Node) -> None:
    key = node.key
    if node.computed:
      key_text = key.text
    elif isinstance(key, Literal) and isinstance(key.value, str):
      key_text = key.raw
    else:
      key_text = f"'{key.text}'"
    node.text = f"{key_text}: {node.value.text}"

  def enter_ObjectExpression(self, node: Node) -> None:
    self.indent.push()

  def leave_ObjectExpression(self, node: Node) -> None:
    inner = self.indent.current
    self.indent.pop()
    if not node.properties:
      node.text = EMPTY_MAPPING
      return
    separator = f",\n{inner}"
    properties = separator.join(p.text for p in node.properties)
    node.text = f"{{\n{inner}{properties}\n{self.indent.current}}}"

  # --- Blocks ---

  def _render_suite(self, statements: List[Node]) -> str:
    inner = self.indent.current
    if not statements:
      return f"{inner}{NO_OP}"
    return inner + f"\n{inner}".join(s.text for s in statements)

  def _mark_bare_blocks(self, statements: List[Node]) -> None:
    self._bare_blocks.update(id(s) for s in statements if s.kind == NodeKind.BLOCK_STATEMENT)

  def enter_BlockStatement(self, node: Node) -> None:
    self._mark_bare_blocks(node.body)
    if id(node) not in self._bare_blocks:
      self.indent.push()

  def leave_BlockStatement(self, node: Node) -> None:
    if id(node) in self._bare_blocks:
      self._bare_blocks.discard(id(node))
      node.text = f"\n{self.indent.current}".join(s.text for s in node.body) or NO_OP
      return
    node.text = self._render_suite(node.body)
    self.indent.pop()

  def enter_ClassBody(self, node: Node) -> None:
    self.indent.push()

  def leave_ClassBody(self, node: Node) -> None:
    node.text = self._render_suite(node.body)
    self.indent.pop()

  # --- Statements ---

  def enter_Program(self, node: Node) -> None:
    self._mark_bare_blocks(node.body)

  def leave_Program(self, node: Node) -> None:
    node.text = "\n".join(s.text for s in node.body)

  def leave_ExpressionStatement(self, node: Node) -> None:
    node.text = node.expression.text

  def leave_EmptyStatement(self, node: Node) -> None:
    node.text = NO_OP

  def leave_ReturnStatement(self, node: Node) -> None:
    node.text = "return" if node.argument is None else f"return {node.argument.text}"

  def leave_ThrowStatement(self, node: Node) -> None:
    node.text = f"raise {node.argument.text}"

  def leave_BreakStatement(self, node: Node) -> None:
    node.text = "break"

  def leave_ContinueStatement(self, node: Node) -> None:
    node.text = "continue"

  def leave_VariableDeclarator(self, node: Node) -> None:
    value = NULL_LITERAL if node.init is None else node.init.text
    node.text = f"{node.id.text} = {value}"

  def leave_VariableDeclaration(self, node: Node) -> None:
    node.text = f"\n{self.indent.current}".join(d.text for d in node.declarations)

  def leave_IfStatement(self, node: Node) -> None:
    text = f"if {node.test.text}:\n{node.consequent.text}"
    alternate = node.alternate
    if alternate is not None:
      if alternate.kind == NodeKind.IF_STATEMENT:
        text += f"\n{self.indent.current}el{alternate.text}"
      else:
        text += f"\n{self.indent.current}else:\n{alternate.text}"
    node.text = text

  def leave_WhileStatement(self, node: Node) -> None:
    node.text = f"while {node.test.text}:\n{node.body.text}"

  def leave_ForStatement(self, node: Node) -> None:
    if is_counting_loop(node):
      declarator = node.init.declarations[0]
      var = declarator.id.name
      low = declarator.init.text
      high = node.test.right.text
      node.text = f"for {var} in range({low}, {high}):\n{node.body.text}"
      return

    lines = []
    if node.init is not None:
      lines.append(node.init.text)
    test = "True" if node.test is None else node.test.text
    lines.append(f"while {test}:\n{node.body.text}")
    text = f"\n{self.indent.current}".join(lines)
    if node.update is not None:
      # Update runs as the last statement of the loop body
      text += f"\n{self.indent.deeper}{node.update.text}"
    node.text = text

  # --- Functions & Classes ---

  def leave_FunctionDeclaration(self, node: Node) -> None:
    name = node.id.text if node.id is not None else ""
    node.text = f"def {name}({self._join(node.params)}):\n{node.body.text}"

  def leave_MethodDefinition(self, node: Node) -> None:
    decorator = ""
    params = [p.text for p in node.params]
    if node.method_kind == "constructor":
      name = INITIALIZER_NAME
    else:
      name = node.key.text
      if node.computed:
        name = self._sentinel("computed method name") + name

    if node.static:
      decorator = "@staticmethod"
    else:
      params.insert(0, SELF_NAME)
      if node.method_kind == "get":
        decorator = "@property"
      elif node.method_kind == "set":
        decorator = f"@{name}.setter"

    header = f"def {name}({', '.join(params)}):\n{node.body.text}"
    node.text = f"{decorator}\n{self.indent.current}{header}" if decorator else header

  def leave_ClassDeclaration(self, node: Node) -> None:
    base = f"({node.super_class.text})" if node.super_class is not None else ""
    node.text = f"class {node.id.text}{base}:\n{node.body.text}"
