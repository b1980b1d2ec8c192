#!/usr/bin/env python3
"""
Command-line interface for Quire - static blog generator.
"""

import os
import sys
import argparse
from datetime import date
from importlib import resources
from typing import List, Optional
from . import __version__
from .core import Quire
from .settings import QuireSettings

SAMPLE_POST = """---
title: "Welcome to Quire"
date: {date}
description: "Your first post, written in Markdown with YAML front matter."
categories:
  - Getting Started
---

Congratulations! Your blog is up and running with **Quire**.

## Writing posts

Every post is a Markdown file in `src/posts/` that starts with front matter:

```yaml
---
title: "Post title"            # required
date: 2025-01-31               # required, YYYY-MM-DD
description: "Used for SEO"    # optional, defaults to the title
slug: custom-url               # optional, derived from the title
categories: [Notes, Python]    # optional, defaults to Uncategorized
---
```

Footnotes[^1] and abbreviations such as HTML work too.

*[HTML]: HyperText Markup Language

[^1]: Like this one.

Run `quire --watch` while writing and the site rebuilds as you save.
"""


def copy_starter_files(subdir: str, dest_dir: str) -> None:
    """Copy packaged starter files into dest_dir without overwriting anything."""
    source = resources.files('quire_pkg') / 'starter' / subdir
    for entry in source.iterdir():
        if not entry.is_file():
            continue
        dest_path = os.path.join(dest_dir, entry.name)
        rel_path = os.path.relpath(dest_path)
        if os.path.exists(dest_path):
            print(f"File already exists: {rel_path}")
        else:
            with open(dest_path, 'w', encoding='utf-8') as f:
                f.write(entry.read_text(encoding='utf-8'))
            print(f"Created: {rel_path}")


def create_starter_structure(settings: dict) -> None:
    """Create the source tree with templates, styles and a sample post."""
    current_dir = os.getcwd()

    directories = [settings['posts'], settings['templates'], settings['styles'], settings['public']]
    for directory in directories:
        dir_path = os.path.join(current_dir, directory)
        if os.path.exists(dir_path):
            print(f"Directory already exists: {directory}")
        else:
            os.makedirs(dir_path, exist_ok=True)
            print(f"Created directory: {directory}")

    copy_starter_files('templates', os.path.join(current_dir, settings['templates']))
    copy_starter_files('styles', os.path.join(current_dir, settings['styles']))
    create_sample_content(os.path.join(current_dir, settings['posts']))

    print("\nStarter structure created successfully!")
    print("\nNext steps:")
    print("1. Edit the configuration file (quire.yml)")
    print(f"2. Write posts in '{settings['posts']}/'")
    print("3. Run 'quire' to build your site, or 'quire --watch' while writing")


def create_sample_content(posts_dir: str) -> None:
    """Create a sample blog post."""
    post_path = os.path.join(posts_dir, 'welcome.md')
    if os.path.exists(post_path):
        print(f"Sample post already exists: {os.path.relpath(post_path)}")
        return
    with open(post_path, 'w', encoding='utf-8') as f:
        f.write(SAMPLE_POST.format(date=date.today().isoformat()))
    print(f"Created sample post: {os.path.relpath(post_path)}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Quire - Static Blog Generator')
    parser.add_argument('-w', '--watch', action='store_true', default=None,
                        help='Build, then watch posts, templates and styles and rebuild on change')
    parser.add_argument('--production', action='store_true', default=None,
                        help='Minify CSS and skip source maps (same as QUIRE_ENV=production)')
    parser.add_argument('--output', type=str,
                        help='Output directory for the generated site')
    parser.add_argument('--posts', type=str,
                        help='Directory containing Markdown posts')
    parser.add_argument('--templates', type=str,
                        help='Templates directory')
    parser.add_argument('--styles', type=str,
                        help='Directory containing SCSS sources (main.scss entry)')
    parser.add_argument('--public', type=str,
                        help='Directory copied verbatim into the output root')
    parser.add_argument('--posts-per-page', type=int,
                        help='Number of posts per page for pagination')
    parser.add_argument('--site-title', type=str, help='Site title for pages and feeds')
    parser.add_argument('--site-description', type=str, help='Site description for pages and feeds')
    parser.add_argument('--site-url', type=str,
                        help='Public site URL used for feeds, canonical links and the sitemap')
    parser.add_argument('--base-path', type=str,
                        help='URL prefix for in-site links when hosted under a sub-path')
    parser.add_argument('--debounce-ms', type=int,
                        help='Delay before rebuilding after the last file change in watch mode')
    parser.add_argument('--init', action='store_true',
                        help='Create a sample configuration file and starter project')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    settings_loader = QuireSettings()

    if args.init:
        config_path = settings_loader.create_sample_config()
        print(f"Configuration file: {os.path.relpath(config_path)}")
        print("\nCreating starter project structure...")
        create_starter_structure(settings_loader.load_settings())
        return

    settings_loader.load_settings()

    # Convert argparse Namespace to dict, excluding None values for proper merging
    args_dict = {k: v for k, v in vars(args).items() if v is not None and k != 'init'}

    # Command line arguments take precedence
    final_settings = settings_loader.merge_with_args(args_dict)

    try:
        generator = Quire.from_settings(final_settings)
        if final_settings['watch']:
            generator.watch()
        else:
            generator.build()
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == '__main__':
    main()
