import logging
import os
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from typing import List, Optional

import mistune
import yaml

from .frontmatter import FrontmatterValidator, parse_frontmatter
from .models import Post
from .staleness import list_files

POST_EXTENSIONS = ('.md',)

# One Markdown parser per worker thread
thread_local = threading.local()


class CustomRenderer(mistune.HTMLRenderer):
    def __init__(self):
        super().__init__(escape=False)

    def block_code(self, code, info=None):
        escaped_code = mistune.escape(code)
        if info:
            lang = mistune.escape(info.strip().split(None, 1)[0])
            return f'<pre><code class="language-{lang}">{escaped_code}</code></pre>\n'
        return f'<pre><code>{escaped_code}</code></pre>\n'


def create_markdown_parser():
    """Create a Mistune markdown parser with a custom renderer."""
    return mistune.create_markdown(
        renderer=CustomRenderer(),
        plugins=['table', 'task_lists', 'strikethrough', 'footnotes', 'abbr']
    )


def render_markdown(text):
    """Convert markdown text to HTML."""
    parser = getattr(thread_local, 'markdown_parser', None)
    if parser is None:
        parser = thread_local.markdown_parser = create_markdown_parser()
    return parser(text)


class PostProcessor:
    """Loads every post source into validated, date-ordered Post records."""

    def __init__(self, posts_dir, max_workers: Optional[int] = None):
        self.posts_dir = posts_dir
        self.max_workers = max_workers
        self.logger = logging.getLogger('Quire.Posts')

    def get_post_files(self) -> List[str]:
        return list_files(self.posts_dir, POST_EXTENSIONS)

    def load_post(self, file_path) -> Optional[Post]:
        """Parse and validate one source file. Returns None if it is rejected."""
        filename = os.path.relpath(file_path, self.posts_dir)
        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                text = f.read()
        except (IOError, OSError, UnicodeDecodeError) as e:
            self.logger.error(f"Skipping {filename}: failed to read file: {e}")
            return None

        try:
            data, body = parse_frontmatter(text)
        except yaml.YAMLError as e:
            self.logger.error(f"Skipping {filename}: invalid YAML front matter: {e}")
            return None

        validation = FrontmatterValidator.validate(data, filename)
        for warning in validation.warnings:
            self.logger.warning(warning)
        if not validation.is_valid:
            for error in validation.errors:
                self.logger.error(error)
            self.logger.error(f"Skipping {filename} due to validation errors")
            return None

        metadata = validation.metadata
        return Post(
            title=metadata['title'],
            date=metadata['date'],
            description=metadata['description'],
            slug=metadata['slug'],
            categories=tuple(metadata['categories']),
            content=body,
            rendered_content=render_markdown(body),
            source=file_path,
        )

    def load_posts(self) -> List[Post]:
        """
        Load all valid posts, newest first.

        Posts sharing a date keep their file order. A missing posts directory
        is an empty blog, not an error.
        """
        if not os.path.isdir(self.posts_dir):
            self.logger.warning(f"Posts directory not found: {self.posts_dir}")
            return []

        post_files = self.get_post_files()
        if not post_files:
            self.logger.warning("No markdown files found to process.")
            return []

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            loaded = list(executor.map(self.load_post, post_files))

        posts = sorted((p for p in loaded if p is not None), key=lambda p: p.date, reverse=True)
        return self.dedupe_slugs(posts)

    def dedupe_slugs(self, posts):
        used = set()
        result = []
        for post in posts:
            slug = post.slug
            counter = 2
            while slug in used:
                slug = f"{post.slug}-{counter}"
                counter += 1
            if slug != post.slug:
                self.logger.warning(f"Duplicate slug '{post.slug}' in {post.source}, using '{slug}'")
                post = replace(post, slug=slug)
            used.add(slug)
            result.append(post)
        return result
