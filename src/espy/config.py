"""
Runtime Configuration Store.

Settings are resolved from the ``[tool.espy]`` table of the nearest
``pyproject.toml`` and then overridden by explicit arguments.

.. code-block:: toml

    [tool.espy]
    rewrite_passes = ["bignumber", "builtins"]
    indent_unit = "    "
    strict_mode = true
"""

import sys
from pathlib import Path
from typing import Any, Dict, List, Literal, Optional, Tuple

from pydantic import BaseModel, Field, field_validator

from espy.rules import available_rule_sets, is_known_rule_set

if sys.version_info >= (3, 11):
  import tomllib
else:
  import tomli as tomllib


class RuntimeConfig(BaseModel):
  """
  Configuration container for the conversion engine.
  """

  indent_unit: str = Field("  ", description="Whitespace emitted per nesting level.")
  rewrite_passes: List[str] = Field(
    default_factory=lambda: ["bignumber"],
    description="Rule sets (built-in names or JSON paths) applied in order before generation.",
  )
  source_type: Literal["script", "module"] = Field("script", description="How the source is parsed.")
  allow_global_return: bool = Field(True, description="Accept `return` outside of functions.")
  strict_mode: bool = Field(False, description="If True, untranslatable constructs fail the conversion.")
  verify_output: bool = Field(False, description="If True, generated code is parsed with libcst.")

  @field_validator("indent_unit")
  @classmethod
  def validate_indent_unit(cls, v: str) -> str:
    """
    Ensures the indent unit is non-empty whitespace.

    Args:
        v (str): The candidate unit.

    Returns:
        str: The validated unit.

    Raises:
        ValueError: If the unit is empty or contains non-whitespace.
    """
    if not v or v.strip():
      raise ValueError(f"indent_unit must be non-empty whitespace, got {v!r}")
    return v

  @field_validator("rewrite_passes")
  @classmethod
  def validate_rewrite_passes(cls, v: List[str]) -> List[str]:
    """
    Ensures every pass names a built-in rule set or an existing JSON file.

    Raises:
        ValueError: If a pass cannot be resolved.
    """
    for name in v:
      if not is_known_rule_set(name):
        raise ValueError(f"Unknown rewrite pass: '{name}'. Built-in rule sets: {available_rule_sets()}")
    return v

  @classmethod
  def load(
    cls,
    rewrite_passes: Optional[List[str]] = None,
    indent_unit: Optional[str] = None,
    source_type: Optional[str] = None,
    strict_mode: Optional[bool] = None,
    verify_output: Optional[bool] = None,
    search_path: Optional[Path] = None,
  ) -> "RuntimeConfig":
    """
    Loads configuration from pyproject.toml and applies explicit overrides.

    Relative JSON rule paths in the TOML table are resolved against the
    directory containing that ``pyproject.toml``.

    Args:
        rewrite_passes: Override for the pass list.
        indent_unit: Override for the indent unit.
        source_type: Override for the parse mode.
        strict_mode: Override for strict mode.
        verify_output: Override for output verification.
        search_path: Directory to start searching for TOML config.

    Returns:
        RuntimeConfig: The fully resolved configuration object.
    """
    toml_config, toml_dir = _load_toml_settings(search_path or Path.cwd())

    settings: Dict[str, Any] = dict(toml_config)
    if toml_dir and "rewrite_passes" in settings:
      settings["rewrite_passes"] = [_resolve_pass(p, toml_dir) for p in settings["rewrite_passes"]]

    overrides = {
      "rewrite_passes": rewrite_passes,
      "indent_unit": indent_unit,
      "source_type": source_type,
      "strict_mode": strict_mode,
      "verify_output": verify_output,
    }
    settings.update({k: v for k, v in overrides.items() if v is not None})

    known = set(cls.model_fields)
    return cls(**{k: v for k, v in settings.items() if k in known})


def _resolve_pass(name: str, base_dir: Path) -> str:
  if name in available_rule_sets() or not name.endswith(".json"):
    return name
  path = Path(name)
  return str(path if path.is_absolute() else (base_dir / path).resolve())


def _load_toml_settings(start_path: Path) -> Tuple[Dict[str, Any], Optional[Path]]:
  """
  Searches ``start_path`` and its parents for 'pyproject.toml' and extracts config.

  Args:
      start_path (Path): Directory to start search from.

  Returns:
      Tuple[Dict, Optional[Path]]: The config dict and the directory it was found in.
  """
  current = start_path.resolve()

  for parent in [current, *current.parents]:
    toml_path = parent / "pyproject.toml"
    if toml_path.is_file():
      with open(toml_path, "rb") as f:
        data = tomllib.load(f)
      return data.get("tool", {}).get("espy", {}), parent

  return {}, None
