"""Template store, the catalogue of gestures to recognize.

Templates are kept in memory behind a lock and written through to a JSON
file on every change. Matching a live model fans out over all templates in
parallel and returns whichever matching template finishes first.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from concurrent.futures import FIRST_COMPLETED, ThreadPoolExecutor, wait
from pathlib import Path
from typing import Iterable, Optional

from gesture_trace.config import default_template_path
from gesture_trace.errors import TemplateFileError, TemplateNotFoundError
from gesture_trace.model import Model
from gesture_trace.template import Template, random_id

logger = logging.getLogger("gesture_trace.store")

# Upper bound on search threads per find_matching call.
MAX_SEARCH_WORKERS = 8


class TemplateStore:
    """Thread-safe, file-backed list of templates.

    Usage:
        store = TemplateStore("templates.json")
        store.load()
        store.add(Template.new("circle", model))
        match = store.find_matching(live_model)
    """

    def __init__(self, path: Optional[str | Path] = None):
        self.path = Path(path) if path is not None else default_template_path()
        self._templates: list[Template] = []
        self._lock = threading.Lock()
        self._io_lock = threading.Lock()

    # --- Mutation (write-through) ---

    def add(self, template: Template) -> Template:
        """Add a template and save. Returns the stored template."""
        with self._lock:
            self._insert(template)
        self.save()
        return template

    def add_list(self, templates: Iterable[Template]) -> list[Template]:
        templates = list(templates)
        with self._lock:
            for template in templates:
                self._insert(template)
        self.save()
        return templates

    def _insert(self, template: Template):
        """Append under the lock, re-rolling a colliding id."""
        taken = {t.id for t in self._templates}
        while template.id in taken:
            new_id = random_id()
            logger.warning("Template id %d already taken, using %d", template.id, new_id)
            template.id = new_id
        self._templates.append(template)

    def delete(self, template_id: int) -> Template:
        """Remove the template with the given id and save."""
        with self._lock:
            for i, template in enumerate(self._templates):
                if template.id == template_id:
                    removed = self._templates.pop(i)
                    break
            else:
                raise TemplateNotFoundError(template_id)
        self.save()
        return removed

    def delete_all(self) -> int:
        """Remove every template and save. Returns how many were removed."""
        with self._lock:
            count = len(self._templates)
            self._templates.clear()
        self.save()
        return count

    # --- Queries ---

    def to_templates(self) -> list[Template]:
        """Snapshot of the current templates."""
        with self._lock:
            return list(self._templates)

    def get(self, template_id: int) -> Optional[Template]:
        with self._lock:
            for template in self._templates:
                if template.id == template_id:
                    return template
        return None

    def find_matching(self, model: Model) -> Optional[Template]:
        """Find any template that ``model`` matches, or None.

        All templates are tried concurrently; when several match, the one
        reported first wins.
        """
        templates = self.to_templates()
        if not templates:
            return None

        workers = min(len(templates), MAX_SEARCH_WORKERS)
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="gesture_trace_match") as pool:
            pending = {pool.submit(t.model.matches, model): t for t in templates}
            while pending:
                done, _ = wait(pending, return_when=FIRST_COMPLETED)
                for future in done:
                    template = pending.pop(future)
                    if future.result():
                        for other in pending:
                            other.cancel()
                        return template
        return None

    def __len__(self) -> int:
        with self._lock:
            return len(self._templates)

    # --- Persistence ---

    def load(self) -> int:
        """Replace the templates with those stored on disk.

        A missing file is not an error and leaves the store empty. Returns
        the number of templates loaded.
        """
        if not self.path.is_file():
            logger.info("Not loading templates, no file at %s", self.path)
            with self._lock:
                self._templates = []
            return 0

        try:
            with open(self.path) as f:
                data = json.load(f)
            if not isinstance(data, list):
                raise ValueError("expected a list of templates")
            templates = [Template.from_dict(entry) for entry in data]
        except (OSError, ValueError, KeyError, TypeError, AttributeError) as e:
            logger.error("Failed to load templates from %s: %s", self.path, e)
            raise TemplateFileError(self.path, str(e)) from e

        with self._lock:
            self._templates = templates
        logger.info("Loaded %d templates from %s", len(templates), self.path)
        return len(templates)

    def save(self):
        """Write all templates to disk; remove the file when there are none."""
        with self._io_lock:
            data = [t.to_dict() for t in self.to_templates()]

            if not data:
                if self.path.exists():
                    self.path.unlink()
                    logger.debug("Removed empty template file %s", self.path)
                return

            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=".templates-", suffix=".json")
            try:
                with os.fdopen(fd, "w") as f:
                    json.dump(data, f)
                os.replace(tmp, self.path)
            except BaseException:
                if os.path.exists(tmp):
                    os.unlink(tmp)
                raise
            logger.debug("Saved %d templates to %s", len(data), self.path)
