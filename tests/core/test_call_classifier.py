"""
Tests for the call classifier and replacement builder.

Verifies:
1.  Every row of the decision table (NEW, UNWRAP, WITH_CTX, WRAP_STR, WRAP).
2.  Literal detection: plain and concatenated strings are literals;
    f-strings and named constants are not.
3.  Non-matching call shapes are left alone.
4.  Comma layout and parentheses survive the rewrite.
5.  Structured messages are flagged for review without blocking the rewrite.
"""

import libcst as cst
import pytest

from errmigrate.config import MigrationRule
from errmigrate.core.classifier import (
  NO_MATCH,
  STRUCTURED_MESSAGE_NOTE,
  build_replacement,
  classify,
  is_legacy_call,
  is_string_literal,
)
from errmigrate.enums import RewriteAction
from errmigrate.utils.node_source import capture_node_source

RULE = MigrationRule()


def _rewrite(src: str, rule: MigrationRule = RULE):
  node = cst.parse_expression(src)
  decision = classify(node, rule)
  return decision, capture_node_source(build_replacement(node, decision, rule))


@pytest.mark.parametrize(
  "src, action, expected",
  [
    ('common.NewBasicError("boom", None)', RewriteAction.NEW, 'serrors.New("boom")'),
    ('common.NewBasicError("boom", None, "key", val)', RewriteAction.NEW, 'serrors.New("boom", "key", val)'),
    ("common.NewBasicError(msg, None, 'key', val)", RewriteAction.WITH_CTX, "serrors.WithCtx(msg, 'key', val)"),
    ('common.NewBasicError("boom", err)', RewriteAction.WRAP_STR, 'serrors.WrapStr("boom", err)'),
    ('common.NewBasicError("boom", err, "k", v)', RewriteAction.WRAP_STR, 'serrors.WrapStr("boom", err, "k", v)'),
    ("common.NewBasicError(build(), err)", RewriteAction.WRAP, "serrors.Wrap(build(), err)"),
    ("common.NewBasicError(msg, err, 'k', v)", RewriteAction.WRAP, "serrors.Wrap(msg, err, 'k', v)"),
    ("common.NewBasicError(msg, None)", RewriteAction.UNWRAP, "msg"),
  ],
)
def test_decision_table(src, action, expected):
  """
  Scenario: Each shape of legacy call.
  Expectation: The selected action and the rendered replacement match.
  """
  decision, out = _rewrite(src)
  assert decision.action is action
  assert out == expected


def test_wrapped_error_can_be_any_expression():
  """
  Scenario: The wrapped error is an attribute access or a call.
  Expectation: Anything other than the literal None counts as a wrapped error.
  """
  decision, out = _rewrite('common.NewBasicError("read failed", self.last_error())')
  assert decision.action is RewriteAction.WRAP_STR
  assert out == 'serrors.WrapStr("read failed", self.last_error())'


def test_unwrap_needs_no_import():
  """
  Scenario: A computed message with no wrapped error and no context.
  Expectation: The call becomes the message itself and no import is required.
  """
  decision, _ = _rewrite("common.NewBasicError(get_err(), None)")
  assert decision.action is RewriteAction.UNWRAP
  assert decision.requires_import is False
  assert decision.function is None


@pytest.mark.parametrize(
  "src",
  [
    'common.NewBasicError("boom", None)',
    'common.NewBasicError("boom", err)',
    "common.NewBasicError(msg, err)",
    "common.NewBasicError(msg, None, 'k', v)",
  ],
)
def test_call_forms_require_import(src):
  """
  Scenario: Every action that emits a replacement call.
  Expectation: The decision asks for the replacement import.
  """
  decision, _ = _rewrite(src)
  assert decision.requires_import is True


def test_named_constant_is_not_literal():
  """
  Scenario: The message is a module-level constant holding a string.
  Expectation: No evaluation happens; the name is treated as computed.
  """
  decision, out = _rewrite("common.NewBasicError(ERR_TIMEOUT, None)")
  assert decision.action is RewriteAction.UNWRAP
  assert out == "ERR_TIMEOUT"


def test_fstring_is_not_literal():
  """
  Scenario: An f-string message with a wrapped error.
  Expectation: f-strings are computed at runtime, so WRAP is selected.
  """
  decision, out = _rewrite('common.NewBasicError(f"bad {x}", err)')
  assert decision.action is RewriteAction.WRAP
  assert out == 'serrors.Wrap(f"bad {x}", err)'


def test_concatenated_literal_is_literal():
  """
  Scenario: Implicitly concatenated string tokens.
  Expectation: Treated as one literal.
  """
  decision, out = _rewrite('common.NewBasicError("a" "b", None)')
  assert decision.action is RewriteAction.NEW
  assert out == 'serrors.New("a" "b")'


def test_is_string_literal_rejects_mixed_concatenation():
  """
  Scenario: A plain string concatenated with an f-string.
  Expectation: Not a literal.
  """
  assert is_string_literal(cst.parse_expression('"a" "b"'))
  assert not is_string_literal(cst.parse_expression('"a" f"{b}"'))


@pytest.mark.parametrize(
  "src",
  [
    'other.NewBasicError("x", None)',
    'common.NewError("x", None)',
    'NewBasicError("x", None)',
    'pkg.common.NewBasicError("x", None)',
    'common.NewBasicError("x")',
    "common.NewBasicError()",
    'common.NewBasicError(msg="x", err=None)',
    'common.NewBasicError("x", *rest)',
    "common.NewBasicError(*args)",
  ],
)
def test_non_matching_calls(src):
  """
  Scenario: Calls that differ in receiver, name or argument shape.
  Expectation: NO_MATCH, and the node is returned untouched.
  """
  node = cst.parse_expression(src)
  assert not is_legacy_call(node, RULE)
  decision = classify(node, RULE)
  assert decision is NO_MATCH
  assert build_replacement(node, decision, RULE) is node


def test_trailing_arguments_pass_through():
  """
  Scenario: Keyword arguments after the first two positional ones.
  Expectation: Copied through unchanged.
  """
  decision, out = _rewrite('common.NewBasicError("boom", None, "k", v, extra=1)')
  assert decision.action is RewriteAction.NEW
  assert out == 'serrors.New("boom", "k", v, extra=1)'


def test_multiline_trailing_comma_preserved():
  """
  Scenario: A multi-line call with a trailing comma after None.
  Expectation: The message inherits the trailing comma and line layout.
  """
  src = 'common.NewBasicError(\n    "boom",\n    None,\n)'
  decision, out = _rewrite(src)
  assert decision.action is RewriteAction.NEW
  assert out == 'serrors.New(\n    "boom",\n)'


def test_unwrap_keeps_outer_parentheses():
  """
  Scenario: A parenthesised call that is unwrapped.
  Expectation: The parentheses now wrap the message.
  """
  _, out = _rewrite("(common.NewBasicError(msg, None))")
  assert out == "(msg)"


def test_unwrap_multiline_message_is_parenthesised():
  """
  Scenario: A message expression spanning several lines inside the call.
  Expectation: Parentheses are added so the lifted expression stays valid.
  """
  _, out = _rewrite("common.NewBasicError(a +\n    b, None)")
  assert out.startswith("(")
  assert out.endswith(")")
  cst.parse_expression(out)


@pytest.mark.parametrize(
  "src, expected",
  [
    ("common.NewBasicError(a + b, None)", "(a + b)"),
    ("common.NewBasicError(not ok, None)", "(not ok)"),
    ("common.NewBasicError(a if c else b, None)", "(a if c else b)"),
    ("common.NewBasicError(lambda: 1, None)", "(lambda: 1)"),
    ("common.NewBasicError(1, None)", "(1)"),
    ("common.NewBasicError(self.msg, None)", "self.msg"),
    ("common.NewBasicError(render(x), None)", "render(x)"),
    ("common.NewBasicError(msgs[0], None)", "msgs[0]"),
    ("common.NewBasicError(f'{x}', None)", "f'{x}'"),
  ],
)
def test_unwrap_parenthesises_loose_messages(src, expected):
  """
  Scenario: Unwrapped messages of every binding strength.
  Expectation: Anything looser than an atom is wrapped in parentheses.
  """
  decision, out = _rewrite(src)
  assert decision.action is RewriteAction.UNWRAP
  assert out == expected


@pytest.mark.parametrize(
  "src, action",
  [
    ('common.NewBasicError({"a": 1}, None, "k", v)', RewriteAction.WITH_CTX),
    ("common.NewBasicError([x for x in y], err)", RewriteAction.WRAP),
    ("common.NewBasicError((a, b), None)", RewriteAction.UNWRAP),
  ],
)
def test_structured_message_note(src, action):
  """
  Scenario: The message is an inline container or comprehension.
  Expectation: The rewrite still happens, with a review note attached.
  """
  decision, _ = _rewrite(src)
  assert decision.action is action
  assert decision.note == STRUCTURED_MESSAGE_NOTE


def test_plain_message_has_no_note():
  decision, _ = _rewrite('common.NewBasicError("boom", err)')
  assert decision.note is None


def test_custom_rule_names():
  """
  Scenario: A rule configured for different legacy and replacement symbols.
  Expectation: Matching and emitted names follow the rule.
  """
  rule = MigrationRule(
    legacy_package="errs",
    legacy_function="Make",
    legacy_import="old.errs",
    replacement_package="xerr",
    replacement_import="new.xerr",
    new_function="Plain",
    wrap_str_function="Wrapf",
  )
  decision, out = _rewrite('errs.Make("boom", None)', rule)
  assert decision.action is RewriteAction.NEW
  assert out == 'xerr.Plain("boom")'

  _, out = _rewrite('errs.Make("boom", e)', rule)
  assert out == 'xerr.Wrapf("boom", e)'

  assert classify(cst.parse_expression('common.NewBasicError("boom", None)'), rule) is NO_MATCH
