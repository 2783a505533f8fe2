"""
Call Classifier and Replacement Builder.

Maps the syntactic shape of a legacy constructor call onto one of the
replacement call forms. The decision looks at two things only:

* whether the wrapped-error argument (``args[1]``) is the literal ``None``;
* whether the message argument (``args[0]``) is a string literal token.

Decision table (first match wins)::

    wrapped    message       context   action     new arguments
    None       literal       -         NEW        [msg, *ctx]
    None       non-literal   absent    UNWRAP     call replaced by msg
    None       non-literal   present   WITH_CTX   [msg, *ctx]
    other      literal       -         WRAP_STR   [msg, err, *ctx]
    other      non-literal   -         WRAP       [msg, err, *ctx]

Nothing is evaluated. A module-level constant holding a string is a
``cst.Name`` and therefore non-literal.

The classifier never mutates the tree. :func:`build_replacement` constructs
the new node; the walker decides where it goes.
"""

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

import libcst as cst

from errmigrate.config import MigrationRule
from errmigrate.enums import RewriteAction
from errmigrate.utils.node_source import capture_node_source

# Inline constructions of structured values. A message built this way probably
# carries a payload the automatic rule does not model.
STRUCTURED_LITERALS: Tuple[type, ...] = (
  cst.Dict,
  cst.List,
  cst.Tuple,
  cst.Set,
  cst.DictComp,
  cst.ListComp,
  cst.SetComp,
)

STRUCTURED_MESSAGE_NOTE = "structured literal used as error message; review the rewrite manually"

# Expressions that keep their meaning in any operand position. Integer
# literals are left out since `1.real` does not parse.
TIGHT_EXPRESSIONS: Tuple[type, ...] = (
  cst.Name,
  cst.Attribute,
  cst.Call,
  cst.Subscript,
  cst.SimpleString,
  cst.FormattedString,
  cst.Float,
  cst.Imaginary,
  cst.Ellipsis,
  *STRUCTURED_LITERALS,
)


@dataclass(frozen=True)
class RewriteDecision:
  """
  Result of classifying one call expression.

  Attributes:
      action: The selected rewrite action.
      function: Replacement function name, or None for UNWRAP / NO_MATCH.
      args: Arguments of the replacement call, in order. For UNWRAP the single
          element is the message argument.
      requires_import: True if the result references the replacement module.
      note: Optional diagnostic for manual review. Never blocks the rewrite.
  """

  action: RewriteAction
  function: Optional[str] = None
  args: Tuple[cst.Arg, ...] = ()
  requires_import: bool = False
  note: Optional[str] = None


NO_MATCH = RewriteDecision(action=RewriteAction.NO_MATCH)


def is_string_literal(expr: cst.BaseExpression) -> bool:
  """
  Checks whether an expression is a plain string literal token.

  Implicitly concatenated plain literals (``"a" "b"``) count. f-strings do
  not, since they are computed at runtime.

  Args:
      expr: The expression to inspect.

  Returns:
      bool: True for literal strings.
  """
  if isinstance(expr, cst.SimpleString):
    return True
  if isinstance(expr, cst.ConcatenatedString):
    return is_string_literal(expr.left) and is_string_literal(expr.right)
  return False


def is_none_literal(expr: cst.BaseExpression) -> bool:
  """
  Args:
      expr: The expression to inspect.

  Returns:
      bool: True if the expression is the bare ``None`` keyword.
  """
  return isinstance(expr, cst.Name) and expr.value == "None"


def is_structured_literal(expr: cst.BaseExpression) -> bool:
  """
  Args:
      expr: The expression to inspect.

  Returns:
      bool: True for inline container displays and comprehensions.
  """
  return isinstance(expr, STRUCTURED_LITERALS)


def _is_plain_positional(arg: cst.Arg) -> bool:
  return arg.keyword is None and arg.star == ""


def is_legacy_call(node: cst.Call, rule: MigrationRule) -> bool:
  """
  Checks whether a call targets the configured legacy constructor.

  A match is ``<legacy_package>.<legacy_function>(msg, err, ...)`` where the
  receiver is a bare name and the first two arguments are plain positional
  arguments.

  Args:
      node: The call expression.
      rule: The migration rule naming the legacy symbol.

  Returns:
      bool: True if the call should be classified.
  """
  func = node.func
  if not isinstance(func, cst.Attribute):
    return False
  if not isinstance(func.value, cst.Name) or func.value.value != rule.legacy_package:
    return False
  if func.attr.value != rule.legacy_function:
    return False
  if len(node.args) < 2:
    return False
  return _is_plain_positional(node.args[0]) and _is_plain_positional(node.args[1])


def classify(node: cst.Call, rule: MigrationRule) -> RewriteDecision:
  """
  Selects the rewrite for a call expression.

  Args:
      node: The call expression. Any call may be passed; non-legacy calls
          yield ``NO_MATCH``.
      rule: The migration rule.

  Returns:
      RewriteDecision: The selected action and the replacement arguments.
  """
  if not is_legacy_call(node, rule):
    return NO_MATCH

  message, wrapped = node.args[0], node.args[1]
  context: Sequence[cst.Arg] = node.args[2:]
  literal_message = is_string_literal(message.value)

  note = None
  if is_structured_literal(message.value):
    note = STRUCTURED_MESSAGE_NOTE

  if is_none_literal(wrapped.value):
    if literal_message:
      action = RewriteAction.NEW
    elif not context:
      return RewriteDecision(action=RewriteAction.UNWRAP, args=(message,), note=note)
    else:
      action = RewriteAction.WITH_CTX
    new_args = (message, *context)
  else:
    action = RewriteAction.WRAP_STR if literal_message else RewriteAction.WRAP
    new_args = (message, wrapped, *context)

  return RewriteDecision(
    action=action,
    function=rule.function_for(action),
    args=_fix_trailing_comma(new_args, node.args),
    requires_import=action.emits_call,
    note=note,
  )


def _fix_trailing_comma(new_args: Tuple[cst.Arg, ...], old_args: Sequence[cst.Arg]) -> Tuple[cst.Arg, ...]:
  """
  Keeps the comma layout of the original call after an argument is dropped.

  When ``None`` was the last argument, the message now ends the list and
  must take over the trailing comma (or lack of one) and the whitespace
  before the closing bracket.
  """
  if not new_args or new_args[-1] is old_args[-1]:
    return new_args
  old_last = old_args[-1]
  last = new_args[-1].with_changes(comma=old_last.comma, whitespace_after_arg=old_last.whitespace_after_arg)
  return (*new_args[:-1], last)


def _needs_parentheses(expr: cst.BaseExpression) -> bool:
  """
  An argument lifted out of the call loses the call's brackets and lands
  wherever the call stood. Only atoms bind tightly enough for any operand
  position. Line breaks are only valid inside brackets.
  """
  if not isinstance(expr, TIGHT_EXPRESSIONS):
    return True
  return "\n" in capture_node_source(expr)


def build_replacement(node: cst.Call, decision: RewriteDecision, rule: MigrationRule) -> cst.BaseExpression:
  """
  Constructs the node that replaces a classified call.

  The original call's parentheses and whitespace are kept, so only the
  callee and the argument list change.

  Args:
      node: The original call expression.
      decision: The classification of ``node``.
      rule: The migration rule naming the replacement module.

  Returns:
      cst.BaseExpression: The replacement node, or ``node`` itself for NO_MATCH.
  """
  if decision.action is RewriteAction.NO_MATCH:
    return node

  if decision.action is RewriteAction.UNWRAP:
    message = decision.args[0].value
    if node.lpar:
      # Outer parentheses of the call now belong to the message
      return message.with_changes(lpar=[*node.lpar, *message.lpar], rpar=[*message.rpar, *node.rpar])
    if not message.lpar and _needs_parentheses(message):
      return message.with_changes(lpar=[cst.LeftParen()], rpar=[cst.RightParen()])
    return message

  func = node.func
  assert isinstance(func, cst.Attribute)
  new_func = func.with_changes(
    value=cst.Name(rule.replacement_package),
    attr=cst.Name(decision.function),
  )
  return node.with_changes(func=new_func, args=list(decision.args))
