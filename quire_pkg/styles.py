"""
Stylesheet build step.

Compiles styles/main.scss into styles/main.css in the output tree, but only
when one of the stylesheet sources or templates is newer than the compiled
file, or when it was built for the other mode. Development CSS always has a
main.css.map beside it and production CSS never does. Compilation problems
never abort a build: whatever CSS is already on disk stays in place.
"""

import logging
import os
from dataclasses import dataclass
from typing import Callable, List, Optional

import csscompressor
import sass

from .errors import OutputWriteError
from .models import BuildOutput
from .staleness import is_stale, list_files

STYLE_EXTENSIONS = ('.scss', '.sass')
ENTRY_FILE = 'main.scss'


@dataclass
class CompiledStyle:
    css: str
    source_map: Optional[str] = None


def sass_compile(entry_path, css_path, production):
    """Compile an SCSS entry file with libsass."""
    if production:
        return CompiledStyle(css=sass.compile(filename=entry_path, output_style='expanded'))
    css, source_map = sass.compile(
        filename=entry_path,
        output_style='expanded',
        source_map_filename=css_path + '.map',
        output_filename_hint=css_path,
        source_map_contents=True,
    )
    return CompiledStyle(css=css, source_map=source_map)


class StyleCompiler:
    def __init__(self, styles_dir, templates_dir, output_dir,
                 compiler: Optional[Callable[[str, str, bool], CompiledStyle]] = None):
        self.styles_dir = styles_dir
        self.templates_dir = templates_dir
        self.output_dir = output_dir
        self.compiler = compiler or sass_compile
        self.logger = logging.getLogger('Quire.Styles')

    @property
    def css_path(self):
        return os.path.join(self.output_dir, 'styles', 'main.css')

    @property
    def map_path(self):
        return self.css_path + '.map'

    @property
    def entry_path(self):
        return os.path.join(self.styles_dir, ENTRY_FILE)

    def built_for_other_mode(self, production) -> bool:
        """A source map sits next to development CSS and never next to production CSS."""
        if not os.path.exists(self.css_path):
            return False
        has_map = os.path.exists(self.map_path)
        return has_map if production else not has_map

    def remove_source_map(self):
        if not os.path.exists(self.map_path):
            return
        try:
            os.remove(self.map_path)
        except OSError as e:
            raise OutputWriteError(self.map_path, e) from e
        self.logger.info(f"Removed development source map {self.map_path}")

    def candidate_paths(self) -> List[str]:
        """Stylesheet sources plus every template file."""
        return list_files(self.styles_dir, STYLE_EXTENSIONS) + list_files(self.templates_dir)

    def compile_if_needed(self, mode='development') -> List[BuildOutput]:
        """
        Return the CSS (and source map in development) to write, or an empty
        list when the compiled stylesheet is current or could not be built.
        """
        production = mode == 'production'
        if self.built_for_other_mode(production):
            self.logger.info(f"Existing CSS was not built for {mode}, recompiling")
        elif not is_stale(self.css_path, self.candidate_paths()):
            self.logger.info("Style compilation skipped (no changes)")
            return []

        if not os.path.isfile(self.entry_path):
            self.logger.warning(f"Stylesheet entry {self.entry_path} not found, skipping compilation")
            return []

        self.logger.info(f"Compiling stylesheets ({mode})...")
        try:
            result = self.compiler(self.entry_path, self.css_path, production)
        except Exception as e:
            self.logger.warning(f"Style compilation failed, keeping existing CSS: {e}")
            return []

        css = result.css
        outputs = []
        if production:
            self.remove_source_map()
            css = csscompressor.compress(css)
            original_size = len(result.css.encode('utf-8'))
            minified_size = len(css.encode('utf-8'))
            if original_size:
                reduction = round((1 - minified_size / original_size) * 100)
                self.logger.info(f"CSS minified: {original_size} -> {minified_size} bytes ({reduction}% reduction)")
        elif result.source_map:
            outputs.append(BuildOutput(self.map_path, result.source_map))

        outputs.insert(0, BuildOutput(self.css_path, css))
        return outputs
