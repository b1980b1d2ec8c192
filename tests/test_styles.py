"""Tests for the stylesheet build step."""

import logging
import os
from pathlib import Path

import pytest

from conftest import fake_compiler
from quire_pkg.styles import StyleCompiler, sass_compile


def set_mtime(paths, mtime):
    for path in paths:
        os.utime(path, (mtime, mtime))


def write_css(compiler, mtime, content='/* old */', with_map=True):
    path = Path(compiler.css_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    os.utime(path, (mtime, mtime))
    if with_map:
        Path(compiler.map_path).write_text('{}')
        os.utime(compiler.map_path, (mtime, mtime))


@pytest.fixture
def compiler(site_dir):
    src = os.path.join(site_dir, 'src')
    compiler = StyleCompiler(os.path.join(src, 'styles'), os.path.join(src, 'templates'),
                             os.path.join(site_dir, 'dist'), compiler=fake_compiler)
    set_mtime(compiler.candidate_paths(), 1000)
    return compiler


class TestStyleCompiler:
    """Test cases for StyleCompiler."""

    def test_candidates_include_styles_and_templates(self, compiler):
        names = sorted(os.path.basename(p) for p in compiler.candidate_paths())
        assert names == ['_variables.scss', 'category.html', 'index.html', 'main.scss', 'post.html']

    def test_compiles_when_output_missing(self, compiler):
        outputs = compiler.compile_if_needed('development')
        assert [o.path for o in outputs] == [compiler.css_path, compiler.css_path + '.map']
        assert '/* compiled */' in outputs[0].content
        assert outputs[1].content == '{"version": 3}'

    def test_skips_when_current(self, compiler, caplog):
        write_css(compiler, 2000)
        with caplog.at_level(logging.INFO, logger='Quire.Styles'):
            assert compiler.compile_if_needed() == []
        assert 'Style compilation skipped (no changes)' in caplog.text

    def test_equal_timestamps_skip(self, compiler):
        write_css(compiler, 1000)
        assert compiler.compile_if_needed() == []

    def test_recompiles_after_partial_changes(self, compiler):
        write_css(compiler, 2000)
        set_mtime([os.path.join(compiler.styles_dir, '_variables.scss')], 3000)
        outputs = compiler.compile_if_needed()
        assert outputs[0].path == compiler.css_path

    def test_recompiles_after_template_changes(self, compiler):
        write_css(compiler, 2000)
        set_mtime([os.path.join(compiler.templates_dir, 'post.html')], 3000)
        assert compiler.compile_if_needed() != []

    def test_production_minifies_without_map(self, compiler, caplog):
        with caplog.at_level(logging.INFO, logger='Quire.Styles'):
            outputs = compiler.compile_if_needed('production')
        assert len(outputs) == 1
        css = outputs[0].content
        assert 'body{color:#333}' in css
        assert '\n  color' not in css
        assert 'CSS minified:' in caplog.text

    def test_development_css_recompiled_for_production(self, compiler):
        write_css(compiler, 2000)
        outputs = compiler.compile_if_needed('production')
        assert [o.path for o in outputs] == [compiler.css_path]
        assert not os.path.exists(compiler.map_path)

    def test_production_css_recompiled_for_development(self, compiler):
        write_css(compiler, 2000, with_map=False)
        outputs = compiler.compile_if_needed('development')
        assert [o.path for o in outputs] == [compiler.css_path, compiler.map_path]

    def test_production_css_is_current_in_production(self, compiler):
        write_css(compiler, 2000, with_map=False)
        assert compiler.compile_if_needed('production') == []

    def test_failure_keeps_existing_css(self, compiler, caplog):
        def broken(entry_path, css_path, production):
            raise ValueError('Error: Undefined variable: "$nope"')

        compiler.compiler = broken
        with caplog.at_level(logging.WARNING):
            assert compiler.compile_if_needed() == []
        assert 'Style compilation failed, keeping existing CSS' in caplog.text

    def test_missing_entry_is_skipped(self, compiler, caplog):
        os.remove(compiler.entry_path)
        assert compiler.compile_if_needed() == []
        assert 'not found' in caplog.text


class TestSassCompile:
    """Compiles the starter stylesheet with libsass."""

    def test_starter_styles_compile(self, compiler):
        result = sass_compile(compiler.entry_path, compiler.css_path, production=False)
        assert 'body' in result.css
        assert result.source_map
