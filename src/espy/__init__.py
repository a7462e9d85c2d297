"""
espy Package.

A rule-driven AST transpiler for converting a JavaScript dialect (ES5 plus
arrows, classes and template literals) to readable Python. Library idioms such
as arbitrary precision ``BigN`` arithmetic are rewritten by textual rule tables
before code generation.

Usage
-----

Simple String Conversion
^^^^^^^^^^^^^^^^^^^^^^^^

.. code-block:: python

    import espy
    print(espy.convert("var y = new BigN(1).plus(x);"))
    # y = 1 + x

Advanced Usage (AST Engine)
^^^^^^^^^^^^^^^^^^^^^^^^^^^

.. code-block:: python

    from espy import ASTEngine, RuntimeConfig

    config = RuntimeConfig(rewrite_passes=["bignumber", "builtins"], strict_mode=True)
    engine = ASTEngine(config=config)
    res = engine.run("console.log(a.length);")

    if res.success:
        print(res.code)
    else:
        print(f"Errors: {res.errors}")
"""

from typing import List, Optional

from espy.config import RuntimeConfig
from espy.core.conversion_result import ConversionResult
from espy.core.engine import ASTEngine
from espy.core.errors import EspyError, MalformedPattern, ParseError, UnboundWildcard

__version__ = "0.1.0"


def convert(code: str, passes: Optional[List[str]] = None, strict: bool = False) -> str:
  """
  Transpiles a string of source dialect code to Python.

  Args:
      code (str): The source code to convert.
      passes (list, optional): Rewrite passes to apply, by built-in name or JSON
          path. Defaults to ``["bignumber"]``.
      strict (bool): If True, output containing untranslatable sentinels is
          rejected. If False (default), sentinels are left in place.

  Returns:
      str: The generated Python source.

  Raises:
      ParseError: If the source is malformed.
      ValueError: If ``strict`` is set and some construct could not be translated.
  """
  config = RuntimeConfig(rewrite_passes=["bignumber"] if passes is None else passes, strict_mode=strict)
  engine = ASTEngine(config=config)

  if not strict:
    return engine.convert(code)

  text, untranslatable = engine.generate(engine.rewrite(engine.parse(code)))
  if untranslatable:
    raise ValueError("Transpilation failed:\n" + "\n".join(f"Untranslatable: {r}" for r in untranslatable))
  return text


__all__ = [
  "ASTEngine",
  "ConversionResult",
  "EspyError",
  "MalformedPattern",
  "ParseError",
  "RuntimeConfig",
  "UnboundWildcard",
  "convert",
  "__version__",
]
