"""
Rule Table Loading.

Built-in tables live next to this module as ``<name>.json``. A pass name is
resolved first against the built-ins, then as a path to a JSON file.
"""

import json
from importlib.resources import files
from pathlib import Path
from typing import List, Union

from pydantic import ValidationError

from espy.rules.schema import RuleSet


def resolve_rules_dir() -> Path:
  """
  Locates the directory holding the built-in JSON tables.

  Prefers the source tree (editable installs, tests) and falls back to package
  resources for installed distributions.

  Returns:
      Path: The absolute path to the tables directory.
  """
  local_path = Path(__file__).parent
  if (local_path / "bignumber.json").exists():
    return local_path

  return Path(str(files("espy.rules")))


def available_rule_sets() -> List[str]:
  """
  Lists the names of the built-in tables.

  Returns:
      List[str]: Sorted table names.
  """
  return sorted(p.stem for p in resolve_rules_dir().glob("*.json"))


def is_known_rule_set(name_or_path: str) -> bool:
  if name_or_path in available_rule_sets():
    return True
  path = Path(name_or_path)
  return path.suffix == ".json" and path.is_file()


def load_rule_set(name_or_path: Union[str, Path]) -> RuleSet:
  """
  Loads and validates a rule table.

  Args:
      name_or_path: A built-in table name (e.g. 'bignumber') or a JSON file path.

  Returns:
      RuleSet: The validated table.

  Raises:
      ValueError: If the table cannot be found, read, or validated.
  """
  candidate = str(name_or_path)
  if candidate in available_rule_sets():
    path = resolve_rules_dir() / f"{candidate}.json"
  else:
    path = Path(candidate)
    if not path.is_file():
      raise ValueError(f"Unknown rule set: '{candidate}'. Built-in rule sets: {available_rule_sets()}")

  try:
    with open(path, "r", encoding="utf-8") as f:
      content = json.load(f)
  except (OSError, json.JSONDecodeError) as e:
    raise ValueError(f"Cannot read rule set {path}: {e}")

  if not isinstance(content, dict):
    raise ValueError(f"Rule set {path} must be a JSON object, got {type(content).__name__}")

  content.setdefault("name", path.stem)
  try:
    return RuleSet.model_validate(content)
  except ValidationError as e:
    raise ValueError(f"Rule set {path} failed validation: {e}")
