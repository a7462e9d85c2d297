"""
Parser Bridge (ESTree -> Node Model).

The source dialect is parsed by `esprima`, which yields an ESTree object graph.
This module adapts that graph into the dataclasses of `espy.core.nodes`:

1.  **Generic Conversion**: Child slots and scalars are copied by name, using
    each class's slot tuples and a small rename table for ESTree fields that
    clash with the ``kind`` discriminator.
2.  **Shape Normalisation**: Method values are flattened, and non-block bodies
    of ``if``/``for``/``while`` are wrapped into blocks so every indented suite
    is rendered by the same rule.
3.  **Containment**: Constructs outside the model become `Unsupported` nodes
    rather than aborting the parse.
"""

from dataclasses import MISSING, fields
from typing import Any, Dict, Optional

import esprima
from esprima.error_handler import Error as EsprimaError

from espy.core.errors import ParseError
from espy.core.nodes import (
  BlockStatement,
  Node,
  NodeKind,
  Program,
  Unsupported,
  node_class,
)

_ILLEGAL_RETURN = "Illegal return statement"

# Node field name -> ESTree attribute name
_ESTREE_NAMES: Dict[str, str] = {
  "declaration_kind": "kind",
  "method_kind": "kind",
  "property_kind": "kind",
  "super_class": "superClass",
}

_ESTREE_KINDS = {kind.value for kind in NodeKind} - {NodeKind.WILDCARD.value, NodeKind.UNSUPPORTED.value}


def parse(source: str, source_type: str = "script", allow_global_return: bool = True) -> Program:
  """
  Parses source dialect text into a `Program` node.

  Args:
      source: The program text.
      source_type: ``"script"`` or ``"module"``.
      allow_global_return: If True, a top-level ``return`` is accepted.

  Returns:
      Program: The converted tree.

  Raises:
      ParseError: If esprima rejects the text.
  """
  entry = esprima.parseModule if source_type == "module" else esprima.parseScript
  try:
    tree = entry(source, {"tolerant": True})
  except EsprimaError as e:
    raise _to_parse_error(e) from e

  for tolerated in getattr(tree, "errors", None) or []:
    if allow_global_return and _is_illegal_return(tolerated):
      continue
    raise _to_parse_error(tolerated)

  program = from_estree(tree)
  if not isinstance(program, Program):
    raise ParseError(f"Expected a Program root, got {getattr(tree, 'type', None)!r}")
  return program


def _is_illegal_return(error: Any) -> bool:
  description = getattr(error, "description", None) or str(error)
  return _ILLEGAL_RETURN in description


def _to_parse_error(error: Any) -> ParseError:
  description = getattr(error, "description", None) or str(error)
  return ParseError(
    description,
    line=getattr(error, "lineNumber", None),
    column=getattr(error, "column", None),
  )


def from_estree(obj: Any) -> Optional[Node]:
  """
  Converts one ESTree object (and its subtree) into the node model.

  Args:
      obj: An esprima node, or None.

  Returns:
      Optional[Node]: The converted node, or None for an empty slot.
  """
  if obj is None:
    return None

  type_name = getattr(obj, "type", None)

  if type_name == "MethodDefinition":
    return _convert_method(obj)
  if type_name == "Literal" and getattr(obj, "regex", None):
    return Unsupported(source_type="RegExpLiteral")
  if type_name == "ArrowFunctionExpression" and not getattr(obj, "expression", False):
    return Unsupported(source_type="ArrowFunctionExpression")
  if type_name == "TemplateElement":
    return _convert_template_element(obj)
  if type_name not in _ESTREE_KINDS:
    return Unsupported(source_type=str(type_name))

  cls = node_class(NodeKind(type_name))
  defaulted = {f.name for f in fields(cls) if f.default is not MISSING or f.default_factory is not MISSING}
  kwargs: Dict[str, Any] = {}
  for name in cls.CHILDREN:
    kwargs[name] = _convert_slot(getattr(obj, _ESTREE_NAMES.get(name, name), None))
  for name in cls.SCALARS:
    value = getattr(obj, _ESTREE_NAMES.get(name, name), None)
    # null literals carry a genuine None value
    if value is not None or name not in defaulted:
      kwargs[name] = value

  node = cls(**kwargs)
  _normalise_bodies(node)
  return node


def _convert_slot(value: Any) -> Any:
  if isinstance(value, (list, tuple)):
    return [from_estree(item) for item in value]
  return from_estree(value)


def _convert_method(obj: Any) -> Node:
  function = getattr(obj, "value", None)
  cls = node_class(NodeKind.METHOD_DEFINITION)
  return cls(
    key=from_estree(getattr(obj, "key", None)),
    params=_convert_slot(getattr(function, "params", None) or []),
    body=from_estree(getattr(function, "body", None)),
    method_kind=getattr(obj, "kind", None) or "method",
    static=bool(getattr(obj, "static", False)),
    computed=bool(getattr(obj, "computed", False)),
  )


def _convert_template_element(obj: Any) -> Node:
  value = getattr(obj, "value", None)
  if isinstance(value, dict):
    raw, cooked = value.get("raw", ""), value.get("cooked")
  else:
    raw, cooked = getattr(value, "raw", "") or "", getattr(value, "cooked", None)
  cls = node_class(NodeKind.TEMPLATE_ELEMENT)
  return cls(raw=raw, cooked=cooked, tail=bool(getattr(obj, "tail", False)))


def _as_block(node: Optional[Node]) -> Optional[Node]:
  if node is None or isinstance(node, BlockStatement):
    return node
  return BlockStatement(body=[node])


def _normalise_bodies(node: Node) -> None:
  kind = node.kind
  if kind == NodeKind.IF_STATEMENT:
    node.consequent = _as_block(node.consequent)
    if node.alternate is not None and node.alternate.kind != NodeKind.IF_STATEMENT:
      node.alternate = _as_block(node.alternate)
  elif kind in (NodeKind.FOR_STATEMENT, NodeKind.WHILE_STATEMENT):
    node.body = _as_block(node.body)
