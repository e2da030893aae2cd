import json
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional


class JsonFileType(str, Enum):
    """Enumeration for the different states of a JSON file check."""

    VALID_JSON = "VALID_JSON"
    MALFORMED_JSON = "MALFORMED_JSON"
    NOT_JSON = "NOT_JSON"
    MISSING = "MISSING"


def check_json_file(file_path: Path) -> JsonFileType:
    """
    Checks whether a file is missing, valid JSON, malformed JSON, or not JSON.

    A file with a .json extension that fails to parse is considered
    malformed. Any other file that fails to parse (or cannot be read as
    UTF-8 text) is considered not JSON.

    Args:
        file_path: The path to the file to check.

    Returns:
        The type of the file as a JsonFileType enum member.
    """
    if not file_path.exists():
        return JsonFileType.MISSING
    if not file_path.is_file():
        return JsonFileType.NOT_JSON

    try:
        content = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return JsonFileType.NOT_JSON

    try:
        json.loads(content)
        return JsonFileType.VALID_JSON
    except json.JSONDecodeError:
        if file_path.suffix.lower() == ".json":
            return JsonFileType.MALFORMED_JSON
        return JsonFileType.NOT_JSON


def read_json_object(file_path: Path) -> Optional[Dict[str, Any]]:
    """
    Load a JSON object from `file_path`.

    Returns None when the file does not hold a JSON object (a list or a
    scalar, for example).

    Raises:
        OSError: If the file cannot be read.
        json.JSONDecodeError: If the content is not valid JSON.
    """
    data = json.loads(file_path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        return None
    return data


def write_json_object(file_path: Path, data: Dict[str, Any]) -> None:
    """Write `data` to `file_path` as UTF-8 JSON with 2-space indentation."""
    file_path.write_text(
        json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8"
    )
