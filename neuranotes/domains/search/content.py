"""
Plain Text Extraction - Flatten stored document bodies for substring search.

Bodies come in three shapes:
- plain strings
- uploaded files: {"type": "uploaded_file", "original_content": "..."}
- rich-text JSON trees: {"type": "doc", "content": [{"type": "paragraph", ...}]}
"""

from __future__ import annotations

import json
from typing import Any

__all__ = ["PlainTextExtractor"]


class PlainTextExtractor:
    """Default content extractor for the document fallback search."""

    def extract_plain_text(self, body: Any) -> str:
        if body is None:
            return ""
        if isinstance(body, str):
            return self._from_string(body)
        if isinstance(body, dict):
            if body.get("type") == "uploaded_file":
                return str(body.get("original_content") or "")
            parts: list[str] = []
            self._collect(body, parts)
            return " ".join(parts)
        if isinstance(body, list):
            parts = []
            for node in body:
                self._collect(node, parts)
            return " ".join(parts)
        return str(body)

    def _from_string(self, body: str) -> str:
        # Bodies read back from storage may still be serialized JSON
        stripped = body.lstrip()
        if stripped.startswith("{"):
            try:
                parsed = json.loads(stripped)
            except ValueError:
                return body
            if isinstance(parsed, dict):
                return self.extract_plain_text(parsed)
        return body

    def _collect(self, node: Any, parts: list[str]) -> None:
        if not isinstance(node, dict):
            return
        if node.get("type") == "text":
            text = node.get("text")
            if text:
                parts.append(str(text))
            return
        for child in node.get("content") or []:
            self._collect(child, parts)
