"""Load JSON or YAML documents from a URL or a local file.

Both the configuration overlay and the Swagger/OpenAPI spec (read when the
application name has to be derived from ``info.title``) go through this
module. Format detection uses the file extension or the response
content-type as a hint and falls back to trying JSON, then YAML.

The public functions are:

* :func:`load_document` -- Load and parse a document from any supported source.
* :func:`spec_title` -- Return ``info.title`` from a loaded spec.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import httpx
import yaml

from specgen.exceptions import DocumentLoadError


def load_document(source: str | Path) -> dict[str, Any]:
    """Load a JSON/YAML mapping from a URL or file path.

    Args:
        source: An http(s) URL or a file path.

    Returns:
        The parsed document as a dictionary.

    Raises:
        DocumentLoadError: If the source cannot be loaded or parsed, or does
            not contain a mapping at the top level.
    """
    source = str(source)
    if source.startswith(("http://", "https://")):
        return _load_from_url(source)
    return _load_from_file(source)


def spec_title(spec: dict[str, Any]) -> str:
    """Return the ``info.title`` of *spec*, or an empty string."""
    info = spec.get("info")
    if not isinstance(info, dict):
        return ""
    title = info.get("title")
    return str(title).strip() if title is not None else ""


def _load_from_url(url: str) -> dict[str, Any]:
    """Fetch a document from URL. Supports JSON and YAML responses."""
    try:
        response = httpx.get(url, timeout=30.0, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise DocumentLoadError(
            f"HTTP {exc.response.status_code} fetching {url}"
        ) from exc
    except httpx.RequestError as exc:
        raise DocumentLoadError(f"Failed to fetch {url}: {exc}") from exc

    content_type = response.headers.get("content-type", "")
    hint = ""
    if "json" in content_type:
        hint = "json"
    elif "yaml" in content_type or "yml" in content_type:
        hint = "yaml"

    return _parse_content(response.text, hint=hint)


def _load_from_file(path: str) -> dict[str, Any]:
    """Load a document from a local file.

    Supports .json, .yaml, and .yml extensions. Falls back to content-based
    detection if the extension is not recognized.
    """
    file_path = Path(path)
    if not file_path.is_file():
        raise DocumentLoadError(f"File not found: {path}")

    try:
        content = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise DocumentLoadError(f"Failed to read {path}: {exc}") from exc

    if not content.strip():
        raise DocumentLoadError(f"File is empty: {path}")

    suffix = file_path.suffix.lower()
    hint = ""
    if suffix == ".json":
        hint = "json"
    elif suffix in (".yaml", ".yml"):
        hint = "yaml"

    return _parse_content(content, hint=hint)


def _parse_content(content: str, hint: str = "") -> dict[str, Any]:
    """Parse content as JSON or YAML.

    Tries JSON first (unless hint is 'yaml'), then falls back to YAML.
    Valid JSON is also valid YAML, but JSON parsing is stricter and faster.

    Raises:
        DocumentLoadError: If the content cannot be parsed as either format.
    """
    json_error: Exception | None = None
    yaml_error: Exception | None = None

    if hint != "yaml":
        try:
            result = json.loads(content)
        except json.JSONDecodeError as exc:
            json_error = exc
            if hint == "json":
                raise DocumentLoadError(f"Invalid JSON: {exc}") from exc
        else:
            return _require_mapping(result)

    try:
        result = yaml.safe_load(content)
    except yaml.YAMLError as exc:
        yaml_error = exc
    else:
        return _require_mapping(result)

    msg = "Failed to parse document as JSON or YAML"
    if json_error:
        msg += f"\n  JSON error: {json_error}"
    if yaml_error:
        msg += f"\n  YAML error: {yaml_error}"
    raise DocumentLoadError(msg)


def _require_mapping(result: Any) -> dict[str, Any]:
    if not isinstance(result, dict):
        kind = type(result).__name__ if result is not None else "empty document"
        raise DocumentLoadError(f"Document must be a JSON/YAML object (got {kind})")
    return result
