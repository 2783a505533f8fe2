"""
Tests for the CallRewriter tree walker.

Verifies:
1.  Calls are rewritten wherever they appear (statements, arguments, nested scopes).
2.  Nested legacy calls are rewritten inner-first and never matched twice.
3.  Per-module flags and counters reflect what happened.
4.  Review notes carry the original position.
"""

import ast
import textwrap

import libcst as cst
import pytest
from libcst.metadata import MetadataWrapper

from errmigrate.config import MigrationRule
from errmigrate.core.classifier import STRUCTURED_MESSAGE_NOTE
from errmigrate.core.walker import CallRewriter, MigrationNote
from errmigrate.enums import RewriteAction


def _walk(code: str):
  rewriter = CallRewriter(MigrationRule())
  tree = MetadataWrapper(cst.parse_module(textwrap.dedent(code))).visit(rewriter)
  return tree.code, rewriter


def test_rewrites_in_nested_scopes():
  """
  Scenario: Legacy calls inside a method, a lambda and a return statement.
  Expectation: All of them are rewritten.
  """
  code, rewriter = _walk(
    """
    class Conn:
        def open(self, err):
            if err:
                return common.NewBasicError("open failed", err)
            self.cb = lambda: common.NewBasicError("late", None)
    """
  )
  assert 'return serrors.WrapStr("open failed", err)' in code
  assert 'lambda: serrors.New("late")' in code
  assert "common.NewBasicError" not in code
  assert rewriter.rewrites[RewriteAction.WRAP_STR] == 1
  assert rewriter.rewrites[RewriteAction.NEW] == 1


def test_nested_calls_inner_first():
  """
  Scenario: A legacy call used as the wrapped error of another.
  Expectation: The inner call is rewritten first; the outer one then sees a
  non-None wrapped error and becomes WRAP_STR.
  """
  code, rewriter = _walk('err = common.NewBasicError("outer", common.NewBasicError("inner", None))\n')
  assert code == 'err = serrors.WrapStr("outer", serrors.New("inner"))\n'
  assert sum(rewriter.rewrites.values()) == 2


def test_legacy_call_in_context_argument():
  """
  Scenario: A legacy call appears among the context arguments.
  Expectation: Both calls are rewritten.
  """
  code, _ = _walk('e = common.NewBasicError(msg, None, "cause", common.NewBasicError("x", None))\n')
  assert code == 'e = serrors.WithCtx(msg, "cause", serrors.New("x"))\n'


def test_unwrap_only_module_needs_no_import():
  """
  Scenario: The only rewrite is an UNWRAP.
  Expectation: Modified, but no import is requested.
  """
  code, rewriter = _walk("x = common.NewBasicError(msg, None)\n")
  assert code == "x = msg\n"
  assert rewriter.modified is True
  assert rewriter.needs_import is False
  assert rewriter.rewrites == {RewriteAction.UNWRAP: 1}


def test_no_match_leaves_flags_clear():
  """
  Scenario: A module without legacy calls but with similar-looking ones.
  Expectation: Nothing is modified and the code is returned byte for byte.
  """
  src = 'x = other.NewBasicError("a", None)\ny = common.Other("a", None)\n'
  code, rewriter = _walk(src)
  assert code == src
  assert rewriter.modified is False
  assert rewriter.needs_import is False
  assert not rewriter.rewrites
  assert rewriter.notes == []


def test_note_records_position():
  """
  Scenario: A structured message inside a function body.
  Expectation: A note is recorded with the call's line and column.
  """
  code, rewriter = _walk(
    """
    import os

    def f(v):
        return common.NewBasicError({"v": v}, None, "k", v)
    """
  )
  assert "serrors.WithCtx(" in code
  assert len(rewriter.notes) == 1
  note = rewriter.notes[0]
  assert note.message == STRUCTURED_MESSAGE_NOTE
  assert note.line == 5
  assert note.column == 11
  assert note.snippet == 'common.NewBasicError({"v": v}, None, "k", v)'


def test_note_format():
  note = MigrationNote(message="check me", line=3, column=4, snippet="common.NewBasicError(x, None)")
  assert note.format() == "<string>:3:4: check me (common.NewBasicError(x, None))"


def test_note_format_without_position(tmp_path):
  note = MigrationNote(message="check me", snippet="s")
  path = tmp_path / "a.py"
  assert note.format(path) == f"{path}: check me (s)"


@pytest.mark.parametrize(
  "src, expected",
  [
    ("x = common.NewBasicError(a + b, None).args\n", "x = (a + b).args\n"),
    ("x = -common.NewBasicError(a or b, None)\n", "x = -(a or b)\n"),
    ("x = common.NewBasicError(lambda: 1, None)()\n", "x = (lambda: 1)()\n"),
    ("x = common.NewBasicError(a if c else b, None)[0]\n", "x = (a if c else b)[0]\n"),
    ("x = 2 * common.NewBasicError(a - b, None)\n", "x = 2 * (a - b)\n"),
  ],
)
def test_unwrap_keeps_meaning_inside_expressions(src, expected):
  """
  Scenario: An unwrapped call sits under an attribute, operator, call or subscript.
  Expectation: The message binds exactly as the call did.
  """
  code, _ = _walk(src)
  assert code == expected
  assert ast.dump(ast.parse(code)) == ast.dump(ast.parse(expected))
