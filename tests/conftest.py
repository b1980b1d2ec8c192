"""Test configuration and fixtures for Quire tests."""

import pytest
import tempfile
import shutil
import os
from pathlib import Path

import quire_pkg
from quire_pkg import Quire
from quire_pkg.styles import CompiledStyle

STARTER_DIR = Path(os.path.dirname(quire_pkg.__file__)) / 'starter'


def write_post(posts_dir, filename, title='Test Post', date='2024-01-01', description=None,
               slug=None, categories=None, body='Hello **world**.', extra=''):
    """Write a post source file with the given frontmatter fields."""
    lines = ['---']
    if title is not None:
        lines.append(f'title: "{title}"')
    if date is not None:
        lines.append(f'date: {date}')
    if description is not None:
        lines.append(f'description: "{description}"')
    if slug is not None:
        lines.append(f'slug: {slug}')
    if categories is not None:
        lines.append(f'categories: [{", ".join(categories)}]')
    if extra:
        lines.append(extra)
    lines.append('---')
    path = Path(posts_dir) / filename
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text('\n'.join(lines) + '\n\n' + body + '\n', encoding='utf-8')
    return str(path)


def fake_compiler(entry_path, css_path, production):
    """Stand-in for libsass that echoes the entry file as CSS."""
    with open(entry_path, encoding='utf-8') as f:
        source = f.read()
    css = f"/* compiled */\nbody {{\n  color: #333333;\n}}\n/* {len(source)} */\n"
    return CompiledStyle(css=css, source_map=None if production else '{"version": 3}')


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    temp_dir = tempfile.mkdtemp()
    yield temp_dir
    shutil.rmtree(temp_dir, ignore_errors=True)


@pytest.fixture
def site_dir(temp_dir):
    """A site source tree with the starter templates and styles, and no posts."""
    site = Path(temp_dir) / 'site'
    src = site / 'src'
    shutil.copytree(STARTER_DIR / 'templates', src / 'templates')
    shutil.copytree(STARTER_DIR / 'styles', src / 'styles')
    (src / 'posts').mkdir(parents=True)
    return str(site)


@pytest.fixture
def posts_dir(site_dir):
    return os.path.join(site_dir, 'src', 'posts')


@pytest.fixture
def make_quire(site_dir):
    """Factory for a Quire rooted at site_dir, with file logging off."""
    def factory(**kwargs):
        options = dict(
            posts_dir=os.path.join(site_dir, 'src', 'posts'),
            templates_dir=os.path.join(site_dir, 'src', 'templates'),
            styles_dir=os.path.join(site_dir, 'src', 'styles'),
            public_dir=os.path.join(site_dir, 'public'),
            output_dir=os.path.join(site_dir, 'dist'),
            site_title='Test Blog',
            site_description='A blog for tests',
            site_url='https://blog.example.com',
            log_dir=None,
            style_compiler=fake_compiler,
        )
        options.update(kwargs)
        return Quire(**options)
    return factory
