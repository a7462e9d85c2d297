"""
Tests for the Rule-Driven Rewrite Pass.
"""

import pytest

from espy.core.codegen import PythonCodeGenerator
from espy.core.errors import MalformedPattern, UnboundWildcard
from espy.core.nodes import NodeKind
from espy.core.parser import parse
from espy.core.rewriter import RuleRewriter
from espy.core.tracer import TraceEventType, get_tracer
from espy.core.traversal import traverse
from espy.rules import RuleSet, load_rule_set


def rewrite_and_render(code, rules):
  tree = traverse(parse(code), RuleRewriter(rules))
  return traverse(tree, PythonCodeGenerator()).text


def test_plus_rule_example():
  assert rewrite_and_render("total.plus(delta)", [("_1.plus(_2)", "_1 + _2")]) == "total + delta"


def test_rules_apply_bottom_up():
  rules = [("_1.plus(_2)", "_1 + _2"), ("_1.times(_2)", "_1 * _2")]
  assert rewrite_and_render("a.plus(b).times(c)", rules) == "(a + b) * c"


def test_first_matching_rule_wins():
  first = [("f(_1)", "g(_1)"), ("f(_1)", "h(_1)")]
  second = list(reversed(first))
  assert rewrite_and_render("f(x)", first) == "g(x)"
  assert rewrite_and_render("f(x)", second) == "h(x)"


def test_specific_rule_before_general():
  rules = [("f(1)", "one()"), ("f(_1)", "g(_1)")]
  assert rewrite_and_render("f(1); f(2);", rules) == "one()\ng(2)"


def test_bare_wildcard_rule_matches_any_kind():
  rules = [("_1", "wrap(_1)")]
  rewriter = RuleRewriter(rules)
  traverse(parse("a + b"), rewriter)
  # Identifiers, the binary expression, the statement and the program
  assert rewriter.replacements >= 3


def test_replacement_is_not_rewritten_again():
  rules = [("f(_1)", "f(f(_1))")]
  assert rewrite_and_render("f(x)", rules) == "f(f(x))"


def test_no_match_leaves_tree_identical():
  tree = parse("a.minus(b)")
  rewriter = RuleRewriter([("_1.plus(_2)", "_1 + _2")])
  assert traverse(tree, rewriter) is tree
  assert rewriter.replacements == 0


def test_unbound_template_capture_raises():
  rewriter = RuleRewriter([("f(_1)", "g(_1, _2)")])
  with pytest.raises(UnboundWildcard):
    traverse(parse("f(x)"), rewriter)


def test_malformed_rule_rejected_at_construction():
  with pytest.raises(MalformedPattern):
    RuleRewriter([("f(", "g()")])


def test_accepts_rule_set():
  rule_set = RuleSet.from_pairs("demo", [("_1.plus(_2)", "_1 + _2")])
  rewriter = RuleRewriter(rule_set)
  assert rewriter.name == "demo"
  assert len(rewriter.rules) == 1


def test_matches_are_traced():
  rewriter = RuleRewriter([("_1.plus(_2)", "_1 + _2")], name="arith")
  traverse(parse("a.plus(b)"), rewriter)

  events = get_tracer().export()
  matches = [e for e in events if e["type"] == TraceEventType.RULE_MATCH]
  mutations = [e for e in events if e["type"] == TraceEventType.AST_MUTATION]
  assert matches[0]["metadata"] == {"rule_set": "arith", "from": "_1.plus(_2)", "to": "_1 + _2"}
  assert mutations[0]["description"] == "Replaced CallExpression"
  assert mutations[0]["metadata"]["after"].startswith("(BinaryExpression '+'")


# --- Built-in tables ---


@pytest.fixture(scope="module")
def bignumber():
  return load_rule_set("bignumber")


@pytest.mark.parametrize(
  "code, expected",
  [
    ("new BigN(x)", "x"),
    ("new BigN(1).plus(x)", "1 + x"),
    ("a.minus(b)", "a - b"),
    ("a.times(b).dividedBy(c)", "(a * b) / c"),
    ("a.mod(b)", "a % b"),
    ("a.pow(2)", "a ** 2"),
    ("a.eq(b)", "a == b"),
    ("a.lte(b)", "a <= b"),
    ("a.negated()", "-a"),
    ("a.abs()", "abs(a)"),
    ("a.toString()", "str(a)"),
    ("BigN.sqrt(a)", "sqrt(a)"),
  ],
)
def test_bignumber_rules(bignumber, code, expected):
  assert rewrite_and_render(code, bignumber) == expected


def test_builtins_rules():
  rules = load_rule_set("builtins")
  assert rewrite_and_render("console.log(a.length, true)", rules) == "print(len(a), True)"
  assert rewrite_and_render("xs.push(undefined)", rules) == "xs.append(None)"


def test_rewrite_preserves_statement_kinds():
  tree = traverse(parse("var y = a.plus(b);"), RuleRewriter([("_1.plus(_2)", "_1 + _2")]))
  assert tree.body[0].kind is NodeKind.VARIABLE_DECLARATION
  assert tree.body[0].declarations[0].init.kind is NodeKind.BINARY_EXPRESSION
