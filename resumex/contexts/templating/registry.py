"""
Template Variant Registry

Loads template variant modules on first use and caches them. Unknown template
ids fall back to the default variant; asynchronous loads are retried before
the failure is raised to the caller.
"""

import importlib
from types import ModuleType
from typing import Callable, Dict, Mapping, Optional, Tuple

from resumex.contexts.templating.exceptions import TemplateLoadError
from resumex.contexts.templating.logger import _log_debug, _log_warning
from resumex.contexts.templating.variants import DEFAULT_TEMPLATE_ID, VARIANT_MODULES
from resumex.utils.retry import DEFAULT_DELAY_S, DEFAULT_RETRIES, retry_async


class TemplateRegistry:
    """
    Registry for loading and caching template variant modules.

    Variant modules live in resumex/contexts/templating/variants/ and expose
    ``TEMPLATE_ID``, ``NAME`` and ``render(document)``.

    Example:
        registry = TemplateRegistry()
        variant = registry.get_variant("academic")
        tree = variant.render(document)
    """

    def __init__(
        self,
        modules: Optional[Mapping[str, str]] = None,
        importer: Callable[[str], ModuleType] = importlib.import_module,
        retries: int = DEFAULT_RETRIES,
        delay_s: float = DEFAULT_DELAY_S,
    ):
        """
        Initialize the template registry.

        Args:
            modules: Template id -> module path (default: the built-in variants)
            importer: Function importing a module path
            retries: Retries after a failed asynchronous load
            delay_s: Fixed sleep between load attempts
        """
        self.modules = dict(modules if modules is not None else VARIANT_MODULES)
        if DEFAULT_TEMPLATE_ID not in self.modules:
            raise ValueError(f"Registry must include the default template '{DEFAULT_TEMPLATE_ID}'")
        self.importer = importer
        self.retries = retries
        self.delay_s = delay_s
        self._cache: Dict[str, ModuleType] = {}

    def template_ids(self) -> Tuple[str, ...]:
        return tuple(self.modules)

    def resolve_id(self, template_id: str) -> str:
        """Template id that will actually render ``template_id``."""
        if template_id in self.modules:
            return template_id
        _log_warning(f"Unknown template '{template_id}', using '{DEFAULT_TEMPLATE_ID}'")
        return DEFAULT_TEMPLATE_ID

    def _import(self, template_id: str) -> ModuleType:
        module = self.importer(self.modules[template_id])
        if not callable(getattr(module, "render", None)):
            raise TemplateLoadError("Variant module has no render()", template_id=template_id)
        return module

    def get_variant(self, template_id: str) -> ModuleType:
        """
        Get a variant module by template id, importing and caching it if necessary.

        Args:
            template_id: Template id (unknown ids resolve to the default variant)

        Returns:
            Variant module

        Raises:
            TemplateLoadError: If the module cannot be imported
        """
        resolved = self.resolve_id(template_id)
        if resolved in self._cache:
            return self._cache[resolved]

        try:
            module = self._import(resolved)
        except TemplateLoadError:
            raise
        except Exception as e:
            raise TemplateLoadError(
                "Failed to load template variant", template_id=resolved, original_error=e
            ) from e

        self._cache[resolved] = module
        return module

    async def load_variant(self, template_id: str) -> ModuleType:
        """
        Load a variant, retrying failed imports with a fixed delay.

        Args:
            template_id: Template id (unknown ids resolve to the default variant)

        Returns:
            Variant module

        Raises:
            TemplateLoadError: After ``retries`` retries have failed
        """
        resolved = self.resolve_id(template_id)
        if resolved in self._cache:
            return self._cache[resolved]

        attempts = {"count": 0}

        def attempt() -> ModuleType:
            attempts["count"] += 1
            return self._import(resolved)

        def on_retry(retry: int, error: BaseException) -> None:
            _log_warning(f"Loading template '{resolved}' failed ({error!r}); retry {retry}/{self.retries}")

        try:
            module = await retry_async(
                attempt, retries=self.retries, delay_s=self.delay_s, on_retry=on_retry
            )
        except Exception as e:
            raise TemplateLoadError(
                "Failed to load template variant",
                template_id=resolved,
                attempts=attempts["count"],
                original_error=e,
            ) from e

        _log_debug(f"Loaded template '{resolved}' after {attempts['count']} attempt(s)")
        self._cache[resolved] = module
        return module

    def clear_cache(self):
        """Clear the variant cache."""
        self._cache.clear()

    def is_cached(self, template_id: str) -> bool:
        """
        Check if a variant is in the cache.

        Args:
            template_id: Template id

        Returns:
            True if cached, False otherwise
        """
        return template_id in self._cache
