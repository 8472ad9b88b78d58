from __future__ import annotations

from pathlib import Path
from typing import List, Optional
import logging
import runpy

from ..config import PdfConfig, normalize_config
from ..errors import ConfigExtractError, ScriptExecError
from .document import OutputDocument
from .fonts import FontId, FontRegistry
from .host import HookRegistry, PageView, PdfHost, resolve_script
from .objects import DrawContext
from .pages import PageRegistry


logger = logging.getLogger(__name__)


def _resolve_fallback(fonts: FontRegistry, font_path: Optional[str]) -> FontId:
    if font_path:
        font_id = fonts.add_from_path(font_path)
    else:
        font_id = fonts.add_builtin_font()
    fonts.add_font_as_fallback(font_id)
    return font_id


class _State:
    def __init__(self) -> None:
        self._consumed = False

    def _consume(self, action: str) -> None:
        if self._consumed:
            raise RuntimeError(f"Cannot {action}: this {type(self).__name__} was already used")
        self._consumed = True


class Runtime(_State):
    """Configured state: nothing has run yet."""

    def __init__(self, pdf_config: Optional[PdfConfig] = None) -> None:
        super().__init__()
        self.config = pdf_config or PdfConfig()

    def setup(self) -> "ScriptedRuntime":
        self._consume("setup")
        script_path = resolve_script(self.config.script)
        logger.info("Running script %s", script_path)

        registry = PageRegistry()
        hooks = HookRegistry()
        fonts = FontRegistry()
        _resolve_fallback(fonts, self.config.page.font)

        host = PdfHost(self.config, registry, fonts, hooks)
        try:
            runpy.run_path(str(script_path), init_globals={"pdf": host}, run_name="__makepdf__")
        except Exception as exc:
            raise ScriptExecError(f"Script {script_path} failed: {exc}") from exc

        try:
            normalize_config(self.config)
        except (TypeError, ValueError) as exc:
            raise ConfigExtractError(f"Invalid configuration after running {script_path}: {exc}") from exc

        if hooks:
            _run_hooks(host, registry, hooks)

        logger.info("Script finished with %d pages and %d fonts", len(registry), len(fonts))
        return ScriptedRuntime(self.config, registry, fonts)


def _run_hooks(host: PdfHost, registry: PageRegistry, hooks: HookRegistry) -> None:
    added = registry.setup_planner(host.config.planner)
    logger.debug("Hooks registered; planner added %d pages", added)
    for page in registry.pages():
        if page.kind is None:
            continue
        for fn in hooks.hooks_for(page.kind):
            try:
                fn(PageView(host, page.downgrade()))
            except Exception as exc:
                raise ScriptExecError(
                    f"{page.kind.value} hook failed on page {page.title!r}: {exc}"
                ) from exc


class ScriptedRuntime(_State):
    """Pages and fonts are registered; nothing has been drawn."""

    def __init__(self, pdf_config: PdfConfig, registry: PageRegistry, fonts: FontRegistry) -> None:
        super().__init__()
        self.config = pdf_config
        self.registry = registry
        self.fonts = fonts

    def build(self) -> "BuiltDocument":
        self._consume("build")
        page_config = self.config.page
        doc = OutputDocument(self.config.title, page_config.width, page_config.height)

        # The script may have changed pdf.page.font after the first resolution.
        _resolve_fallback(self.fonts, page_config.font)
        for font_id in self.fonts.ids():
            self.fonts.add_font_to_doc(font_id, doc)
        logger.info("Attached %d fonts", len(doc.fonts))

        pages = self.registry.pages()
        for page in pages:
            width = page.width if page.width is not None else page_config.width
            height = page.height if page.height is not None else page_config.height
            doc.plan_page(page.id, page.title, width, height)

        links = 0
        for page in pages:
            doc_page = doc.pages[page.id]
            doc.begin_page(doc_page)
            ctx = DrawContext(self.fonts, page_config, doc.canvas)
            objects = page.objects()
            for obj in objects:
                obj.draw(ctx)
            annotations = [a for obj in objects for a in obj.link_annotations(ctx)]
            annotations.sort(key=lambda a: a.depth)
            for annotation in annotations:
                if doc.add_link(annotation):
                    links += 1
            doc.end_page()
            logger.debug("Drew page %d %r with %d objects", doc_page.index + 1, page.title, len(objects))

        data = doc.finish()
        logger.info("Built %d pages with %d links (%d bytes)", len(pages), links, len(data))
        return BuiltDocument(data, [page.id for page in pages], self.config.title)


class BuiltDocument(_State):
    def __init__(self, data: bytes, page_ids: List[int], title: str) -> None:
        super().__init__()
        self.data = data
        self.page_ids = page_ids
        self.title = title

    @property
    def page_count(self) -> int:
        return len(self.page_ids)

    def save(self, path: Path) -> Path:
        self._consume("save")
        path = Path(path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(self.data)
        except OSError as exc:
            raise OSError(f"Failed to save PDF to {path}: {exc}") from exc
        logger.info("Saved %s", path)
        return path


def make_pdf(pdf_config: PdfConfig, output: Path) -> Path:
    built = Runtime(pdf_config).setup().build()
    return built.save(output)
