from __future__ import annotations  # Named prompt templates with placeholder substitution

import logging
import re
import threading
import time
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from config.settings import settings
from storage.prompts import get_active_template, insert_template_if_missing, upsert_template

from .templates import DEFAULT_TEMPLATES, DefaultTemplate


logger = logging.getLogger(__name__)

_PLACEHOLDER = re.compile(r"\{\{\s*([A-Za-z_][A-Za-z0-9_]*)\s*\}\}")


class TemplateNotFound(KeyError):  # Raised when no stored or built-in template matches
    pass


def substitute(template: str, variables: Mapping[str, Any]) -> str:  # Replace known {{key}} placeholders, keep unknown ones
    def _replace(match: "re.Match[str]") -> str:
        key = match.group(1)
        if key not in variables:
            return match.group(0)
        value = variables[key]
        return "" if value is None else str(value)

    return _PLACEHOLDER.sub(_replace, template)


class PromptCompiler:  # Resolve templates from storage with a TTL cache and built-in fallbacks
    def __init__(
        self,
        *,
        defaults: Optional[Mapping[str, DefaultTemplate]] = None,
        ttl_s: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._defaults: Dict[str, DefaultTemplate] = dict(DEFAULT_TEMPLATES if defaults is None else defaults)
        self._ttl_s = settings.PROMPT_CACHE_TTL_S if ttl_s is None else ttl_s
        self._clock = clock
        self._cache: Dict[str, Tuple[str, float]] = {}
        self._guard = threading.Lock()

    def render(self, name: str, variables: Optional[Mapping[str, Any]] = None) -> str:
        return substitute(self.template(name), variables or {})

    def template(self, name: str) -> str:  # Raw template text for ``name``
        now = self._clock()
        with self._guard:
            cached = self._cache.get(name)
            if cached is not None and cached[1] > now:
                return cached[0]
        stored = get_active_template(name)
        if stored is not None:
            text = stored.template
        elif name in self._defaults:
            logger.debug("Prompt template %s not stored, using built-in default", name)
            text = self._defaults[name].template
        else:
            raise TemplateNotFound(f"Prompt template not registered: {name}")
        with self._guard:
            self._cache[name] = (text, now + self._ttl_s)
        return text

    def save(self, name: str, template: str, *, description: Optional[str] = None, category: str = "general") -> None:
        upsert_template(name=name, template=template, description=description, category=category)
        self.invalidate(name)

    def invalidate(self, name: Optional[str] = None) -> None:
        with self._guard:
            if name is None:
                self._cache.clear()
            else:
                self._cache.pop(name, None)

    def seed_defaults(self) -> int:  # Store built-in templates that are not yet in the database
        inserted = 0
        for name, default in self._defaults.items():
            if insert_template_if_missing(
                name=name,
                template=default.template,
                description=default.description,
                category=default.category,
            ):
                inserted += 1
        if inserted:
            logger.info("Seeded %d default prompt templates", inserted)
        return inserted


__all__ = ["PromptCompiler", "TemplateNotFound", "substitute"]
