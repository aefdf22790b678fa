"""
Named Template Store

Persists reusable snippets as a JSON list in a single file.

Schema (one object per template):
    id (str): Unique identifier (uuid4)
    name (str): Display name
    latex (str): Template source

Usage:
    from texsnap.contexts.templating.template_store import TemplateStore

    store = TemplateStore(Path("outs/templates.json"))
    store.ensure_exists()
    template = store.add_template("Euler", r"e^{i\\pi} + 1 = 0")
    store.delete_template(template.id)
"""

import json
import os
import shutil
import tempfile
import threading
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List

from texsnap.contexts.templating.exceptions import TemplateNotFoundError, TemplateStoreError
from texsnap.contexts.templating.logger import _log_info, _log_warning

DEFAULT_TEMPLATES = [
    ("Basic Equation", "E = mc^2"),
    ("Fraction", r"\frac{a}{b}"),
]


@dataclass
class StoredTemplate:
    id: str
    name: str
    source: str

    def to_dict(self) -> Dict[str, str]:
        return {"id": self.id, "name": self.name, "latex": self.source}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StoredTemplate":
        return cls(id=data.get("id", ""), name=data.get("name", ""), source=data.get("latex", ""))


def _new_id() -> str:
    return str(uuid.uuid4())


class TemplateStore:
    """
    JSON-file store of named templates.

    Read-modify-write operations hold a lock so concurrent add/delete calls in
    one process do not lose updates. Writes are atomic (temp file, then move).
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self._lock = threading.Lock()

    def ensure_exists(self) -> None:
        """
        Create or repair the store file.

        - Missing file: write the default templates
        - Not a JSON list, or unreadable: reset to the default templates
        - Entries without an id: assign one and rewrite
        """
        with self._lock:
            if not self.path.exists():
                self._write(self._defaults())
                _log_info(f"Created template store: {self.path}")
                return

            try:
                existing = json.loads(self.path.read_text(encoding="utf-8"))
            except (OSError, ValueError) as e:
                _log_warning(f"Unreadable template store, resetting to defaults: {e}")
                self._write(self._defaults())
                return

            if not isinstance(existing, list) or not all(isinstance(t, dict) for t in existing):
                _log_warning("Template store is not a list of templates, resetting to defaults")
                self._write(self._defaults())
                return

            missing_ids = [t for t in existing if not t.get("id")]
            for entry in missing_ids:
                entry["id"] = _new_id()
            if missing_ids:
                _log_info(f"Assigned ids to {len(missing_ids)} stored templates")
                self._write(existing)

    def list_templates(self) -> List[StoredTemplate]:
        """Get all stored templates in insertion order."""
        return [StoredTemplate.from_dict(entry) for entry in self._read()]

    def get_template(self, template_id: str) -> StoredTemplate:
        """
        Get one template by id.

        Raises:
            TemplateNotFoundError: If no template has this id
        """
        for template in self.list_templates():
            if template.id == template_id:
                return template
        raise TemplateNotFoundError(template_id)

    def add_template(self, name: str, source: str) -> StoredTemplate:
        """Append a template with a freshly generated id and return it."""
        template = StoredTemplate(id=_new_id(), name=name, source=source)
        with self._lock:
            entries = self._read()
            entries.append(template.to_dict())
            self._write(entries)
        _log_info(f"Added template '{name}' ({template.id})")
        return template

    def delete_template(self, template_id: str) -> List[StoredTemplate]:
        """
        Remove the template with this id (no-op if absent).

        Returns:
            Remaining templates
        """
        with self._lock:
            entries = self._read()
            remaining = [entry for entry in entries if entry.get("id") != template_id]
            self._write(remaining)
        if len(remaining) != len(entries):
            _log_info(f"Deleted template {template_id}")
        return [StoredTemplate.from_dict(entry) for entry in remaining]

    def _defaults(self) -> List[Dict[str, str]]:
        return [
            StoredTemplate(id=_new_id(), name=name, source=source).to_dict()
            for name, source in DEFAULT_TEMPLATES
        ]

    def _read(self) -> List[Dict[str, Any]]:
        try:
            return json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise TemplateStoreError(
                "Could not read template store", store_path=self.path, original_error=e
            ) from e

    def _write(self, entries: List[Dict[str, Any]]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)

        # Write to temp file first (atomic write pattern)
        temp_fd, temp_path = tempfile.mkstemp(suffix=".json", dir=self.path.parent, text=True)
        try:
            with os.fdopen(temp_fd, "w", encoding="utf-8") as f:
                json.dump(entries, f, ensure_ascii=False, indent=2)
            shutil.move(temp_path, self.path)
        except OSError as e:
            if os.path.exists(temp_path):
                os.unlink(temp_path)
            raise TemplateStoreError(
                "Could not write template store", store_path=self.path, original_error=e
            ) from e
