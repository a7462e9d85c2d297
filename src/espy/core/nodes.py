"""
Source Dialect Node Model.

This module defines the tree that every pass of the transpiler operates on.
Each syntactic kind is a dataclass registered under a closed `NodeKind` enum
whose values follow the ESTree type names produced by the parser.

Every node class declares three slot tuples:

- ``CHILDREN``: Child slot names in grammar order. A slot holds a `Node`,
  ``None``, or a list of nodes (list entries may be ``None`` for array holes).
  The traversal engine visits slots in exactly this order.
- ``SCALARS``: Plain attributes (names, operators, raw spellings, flags).
- ``MATCH_KEYS``: The scalars compared by the pattern engine. Defaults to
  ``SCALARS``.

The ``text`` field is an annotation written by the code generator. It is
excluded from equality so that structural comparison ignores it.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Dict, List, Optional, Tuple, Type


class NodeKind(str, Enum):
  """Closed set of node kinds understood by the transpiler."""

  PROGRAM = "Program"
  EXPRESSION_STATEMENT = "ExpressionStatement"
  BLOCK_STATEMENT = "BlockStatement"
  EMPTY_STATEMENT = "EmptyStatement"
  RETURN_STATEMENT = "ReturnStatement"
  IF_STATEMENT = "IfStatement"
  FOR_STATEMENT = "ForStatement"
  WHILE_STATEMENT = "WhileStatement"
  BREAK_STATEMENT = "BreakStatement"
  CONTINUE_STATEMENT = "ContinueStatement"
  THROW_STATEMENT = "ThrowStatement"
  VARIABLE_DECLARATION = "VariableDeclaration"
  VARIABLE_DECLARATOR = "VariableDeclarator"
  FUNCTION_DECLARATION = "FunctionDeclaration"
  ARROW_FUNCTION_EXPRESSION = "ArrowFunctionExpression"
  CLASS_DECLARATION = "ClassDeclaration"
  CLASS_BODY = "ClassBody"
  METHOD_DEFINITION = "MethodDefinition"
  IDENTIFIER = "Identifier"
  LITERAL = "Literal"
  TEMPLATE_LITERAL = "TemplateLiteral"
  TEMPLATE_ELEMENT = "TemplateElement"
  THIS_EXPRESSION = "ThisExpression"
  SUPER = "Super"
  ARRAY_EXPRESSION = "ArrayExpression"
  ARRAY_PATTERN = "ArrayPattern"
  OBJECT_EXPRESSION = "ObjectExpression"
  PROPERTY = "Property"
  ASSIGNMENT_PATTERN = "AssignmentPattern"
  UNARY_EXPRESSION = "UnaryExpression"
  UPDATE_EXPRESSION = "UpdateExpression"
  BINARY_EXPRESSION = "BinaryExpression"
  LOGICAL_EXPRESSION = "LogicalExpression"
  ASSIGNMENT_EXPRESSION = "AssignmentExpression"
  MEMBER_EXPRESSION = "MemberExpression"
  CALL_EXPRESSION = "CallExpression"
  NEW_EXPRESSION = "NewExpression"
  CONDITIONAL_EXPRESSION = "ConditionalExpression"
  # No ESTree counterpart
  WILDCARD = "Wildcard"
  UNSUPPORTED = "Unsupported"


_NODE_REGISTRY: Dict[NodeKind, Type["Node"]] = {}


@dataclass
class Node:
  """
  Base class for all tree nodes.

  Subclasses set ``kind`` and their slot tuples; registration in the kind
  registry happens automatically on class creation.
  """

  kind: ClassVar[NodeKind]
  CHILDREN: ClassVar[Tuple[str, ...]] = ()
  SCALARS: ClassVar[Tuple[str, ...]] = ()
  MATCH_KEYS: ClassVar[Optional[Tuple[str, ...]]] = None

  text: Optional[str] = field(default=None, compare=False, repr=False, kw_only=True)

  def __init_subclass__(cls, **kwargs: Any) -> None:
    super().__init_subclass__(**kwargs)
    kind = cls.__dict__.get("kind")
    if kind is not None:
      _NODE_REGISTRY[kind] = cls

  @classmethod
  def match_keys(cls) -> Tuple[str, ...]:
    """Scalars compared during structural matching."""
    return cls.SCALARS if cls.MATCH_KEYS is None else cls.MATCH_KEYS

  def children(self) -> List["Node"]:
    """
    Flattened list of direct children in traversal order, skipping empty slots.

    Returns:
        List[Node]: The child nodes.
    """
    out: List[Node] = []
    for name in self.CHILDREN:
      value = getattr(self, name)
      if isinstance(value, list):
        out.extend(item for item in value if item is not None)
      elif value is not None:
        out.append(value)
    return out


def node_class(kind: NodeKind) -> Type[Node]:
  """
  Looks up the dataclass registered for a kind.

  Args:
      kind: The node kind.

  Returns:
      Type[Node]: The registered class.

  Raises:
      KeyError: If the kind has no registered class.
  """
  return _NODE_REGISTRY[kind]


def registered_kinds() -> List[NodeKind]:
  return list(_NODE_REGISTRY)


# --- Statements ---


@dataclass
class Program(Node):
  kind = NodeKind.PROGRAM
  CHILDREN = ("body",)

  body: List[Node] = field(default_factory=list)


@dataclass
class ExpressionStatement(Node):
  kind = NodeKind.EXPRESSION_STATEMENT
  CHILDREN = ("expression",)

  expression: Node


@dataclass
class BlockStatement(Node):
  kind = NodeKind.BLOCK_STATEMENT
  CHILDREN = ("body",)

  body: List[Node] = field(default_factory=list)


@dataclass
class EmptyStatement(Node):
  kind = NodeKind.EMPTY_STATEMENT


@dataclass
class ReturnStatement(Node):
  kind = NodeKind.RETURN_STATEMENT
  CHILDREN = ("argument",)

  argument: Optional[Node] = None


@dataclass
class IfStatement(Node):
  kind = NodeKind.IF_STATEMENT
  CHILDREN = ("test", "consequent", "alternate")

  test: Node
  consequent: Node
  alternate: Optional[Node] = None


@dataclass
class ForStatement(Node):
  kind = NodeKind.FOR_STATEMENT
  CHILDREN = ("init", "test", "update", "body")

  init: Optional[Node]
  test: Optional[Node]
  update: Optional[Node]
  body: Node


@dataclass
class WhileStatement(Node):
  kind = NodeKind.WHILE_STATEMENT
  CHILDREN = ("test", "body")

  test: Node
  body: Node


@dataclass
class BreakStatement(Node):
  kind = NodeKind.BREAK_STATEMENT


@dataclass
class ContinueStatement(Node):
  kind = NodeKind.CONTINUE_STATEMENT


@dataclass
class ThrowStatement(Node):
  kind = NodeKind.THROW_STATEMENT
  CHILDREN = ("argument",)

  argument: Node


@dataclass
class VariableDeclaration(Node):
  kind = NodeKind.VARIABLE_DECLARATION
  CHILDREN = ("declarations",)
  SCALARS = ("declaration_kind",)

  declarations: List[Node] = field(default_factory=list)
  declaration_kind: str = "var"


@dataclass
class VariableDeclarator(Node):
  kind = NodeKind.VARIABLE_DECLARATOR
  CHILDREN = ("id", "init")

  id: Node
  init: Optional[Node] = None


# --- Functions & Classes ---


@dataclass
class FunctionDeclaration(Node):
  kind = NodeKind.FUNCTION_DECLARATION
  CHILDREN = ("id", "params", "body")

  id: Optional[Node]
  params: List[Node]
  body: Node


@dataclass
class ArrowFunctionExpression(Node):
  """Only expression-bodied arrows are modelled; block bodies are unsupported."""

  kind = NodeKind.ARROW_FUNCTION_EXPRESSION
  CHILDREN = ("params", "body")

  params: List[Node]
  body: Node


@dataclass
class ClassDeclaration(Node):
  kind = NodeKind.CLASS_DECLARATION
  CHILDREN = ("id", "super_class", "body")

  id: Node
  super_class: Optional[Node]
  body: Node


@dataclass
class ClassBody(Node):
  kind = NodeKind.CLASS_BODY
  CHILDREN = ("body",)

  body: List[Node] = field(default_factory=list)


@dataclass
class MethodDefinition(Node):
  """
  A class member function.

  The ESTree ``value`` function expression is flattened into ``params`` and
  ``body`` so the method owns its signature directly.
  """

  kind = NodeKind.METHOD_DEFINITION
  CHILDREN = ("key", "params", "body")
  SCALARS = ("method_kind", "static", "computed")

  key: Node
  params: List[Node]
  body: Node
  method_kind: str = "method"
  static: bool = False
  computed: bool = False


# --- Expressions ---


@dataclass
class Identifier(Node):
  kind = NodeKind.IDENTIFIER
  SCALARS = ("name",)

  name: str


@dataclass
class Literal(Node):
  """
  A numeric, string, boolean or null literal.

  ``raw`` is the exact source spelling; matching compares ``value`` only.
  """

  kind = NodeKind.LITERAL
  SCALARS = ("value", "raw")
  MATCH_KEYS = ("value",)

  value: Any
  raw: str


@dataclass
class TemplateLiteral(Node):
  kind = NodeKind.TEMPLATE_LITERAL
  CHILDREN = ("quasis", "expressions")

  quasis: List[Node] = field(default_factory=list)
  expressions: List[Node] = field(default_factory=list)


@dataclass
class TemplateElement(Node):
  kind = NodeKind.TEMPLATE_ELEMENT
  SCALARS = ("raw", "cooked", "tail")

  raw: str
  cooked: Optional[str] = None
  tail: bool = False


@dataclass
class ThisExpression(Node):
  kind = NodeKind.THIS_EXPRESSION


@dataclass
class Super(Node):
  kind = NodeKind.SUPER


@dataclass
class ArrayExpression(Node):
  kind = NodeKind.ARRAY_EXPRESSION
  CHILDREN = ("elements",)

  elements: List[Optional[Node]] = field(default_factory=list)


@dataclass
class ArrayPattern(Node):
  kind = NodeKind.ARRAY_PATTERN
  CHILDREN = ("elements",)

  elements: List[Optional[Node]] = field(default_factory=list)


@dataclass
class ObjectExpression(Node):
  kind = NodeKind.OBJECT_EXPRESSION
  CHILDREN = ("properties",)

  properties: List[Node] = field(default_factory=list)


@dataclass
class Property(Node):
  kind = NodeKind.PROPERTY
  CHILDREN = ("key", "value")
  SCALARS = ("computed", "shorthand", "property_kind")

  key: Node
  value: Node
  computed: bool = False
  shorthand: bool = False
  property_kind: str = "init"


@dataclass
class AssignmentPattern(Node):
  kind = NodeKind.ASSIGNMENT_PATTERN
  CHILDREN = ("left", "right")

  left: Node
  right: Node


@dataclass
class UnaryExpression(Node):
  kind = NodeKind.UNARY_EXPRESSION
  CHILDREN = ("argument",)
  SCALARS = ("operator", "prefix")

  operator: str
  argument: Node
  prefix: bool = True


@dataclass
class UpdateExpression(Node):
  kind = NodeKind.UPDATE_EXPRESSION
  CHILDREN = ("argument",)
  SCALARS = ("operator", "prefix")

  operator: str
  argument: Node
  prefix: bool = False


@dataclass
class BinaryExpression(Node):
  kind = NodeKind.BINARY_EXPRESSION
  CHILDREN = ("left", "right")
  SCALARS = ("operator",)

  operator: str
  left: Node
  right: Node


@dataclass
class LogicalExpression(Node):
  kind = NodeKind.LOGICAL_EXPRESSION
  CHILDREN = ("left", "right")
  SCALARS = ("operator",)

  operator: str
  left: Node
  right: Node


@dataclass
class AssignmentExpression(Node):
  kind = NodeKind.ASSIGNMENT_EXPRESSION
  CHILDREN = ("left", "right")
  SCALARS = ("operator",)

  operator: str
  left: Node
  right: Node


@dataclass
class MemberExpression(Node):
  kind = NodeKind.MEMBER_EXPRESSION
  CHILDREN = ("object", "property")
  SCALARS = ("computed",)

  object: Node
  property: Node
  computed: bool = False


@dataclass
class CallExpression(Node):
  kind = NodeKind.CALL_EXPRESSION
  CHILDREN = ("callee", "arguments")

  callee: Node
  arguments: List[Node] = field(default_factory=list)


@dataclass
class NewExpression(Node):
  kind = NodeKind.NEW_EXPRESSION
  CHILDREN = ("callee", "arguments")

  callee: Node
  arguments: List[Node] = field(default_factory=list)


@dataclass
class ConditionalExpression(Node):
  kind = NodeKind.CONDITIONAL_EXPRESSION
  CHILDREN = ("test", "consequent", "alternate")

  test: Node
  consequent: Node
  alternate: Node


# --- Synthetic kinds ---


@dataclass
class Wildcard(Node):
  """
  Pattern placeholder.

  Matches any subtree in its slot and binds it under ``capture``.
  """

  kind = NodeKind.WILDCARD
  SCALARS = ("capture",)

  capture: int


@dataclass
class Unsupported(Node):
  """A construct of the source dialect outside the node model."""

  kind = NodeKind.UNSUPPORTED
  SCALARS = ("source_type",)

  source_type: str


WILDCARD_PREFIX = "_"

BINARY_SHAPED_KINDS = frozenset(
  {
    NodeKind.BINARY_EXPRESSION,
    NodeKind.LOGICAL_EXPRESSION,
    NodeKind.CONDITIONAL_EXPRESSION,
  }
)
