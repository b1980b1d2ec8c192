"""
Frontmatter parsing and validation for post sources.

Required fields are ``title`` and ``date`` (YYYY-MM-DD). ``description``,
``slug`` and ``categories`` are optional and get defaults, each default
producing a warning.
"""

import re
from datetime import datetime
from typing import Any, Dict, Tuple

import yaml

from .models import ValidationResult

DEFAULT_CATEGORY = 'Uncategorized'
DATE_PATTERN = re.compile(r'^\d{4}-\d{2}-\d{2}$')
FRONTMATTER_PATTERN = re.compile(r'\A---[ \t]*\r?\n(.*?)\r?\n---[ \t]*(?:\r?\n|\Z)', re.DOTALL)


class FrontmatterLoader(yaml.SafeLoader):
    """SafeLoader that keeps dates as the text the author wrote."""


FrontmatterLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != 'tag:yaml.org,2002:timestamp']
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


def parse_frontmatter(text: str) -> Tuple[Dict[str, Any], str]:
    """
    Split a source file into its YAML frontmatter and body.

    Raises yaml.YAMLError for malformed YAML. Text without a frontmatter block
    yields empty metadata and the whole text as body.
    """
    match = FRONTMATTER_PATTERN.match(text)
    if not match:
        return {}, text
    metadata = yaml.load(match.group(1), Loader=FrontmatterLoader)
    if not isinstance(metadata, dict):
        metadata = {}
    return metadata, text[match.end():]


def slugify(text: str) -> str:
    """Lowercase, drop anything but a-z/0-9/space/hyphen, hyphenate."""
    slug = text.lower()
    slug = re.sub(r'[^a-z0-9\s-]', '', slug)
    slug = re.sub(r'\s+', '-', slug)
    slug = re.sub(r'-+', '-', slug)
    return slug.strip('-')


def is_valid_date(value: str) -> bool:
    if not DATE_PATTERN.match(value):
        return False
    try:
        datetime.strptime(value, '%Y-%m-%d')
    except ValueError:
        return False
    return True


class FrontmatterValidator:
    REQUIRED_FIELDS = ('title', 'date')
    OPTIONAL_FIELDS = ('description', 'slug')

    @classmethod
    def validate(cls, data: Dict[str, Any], filename: str) -> ValidationResult:
        """Check raw frontmatter fields and fill in defaults."""
        result = ValidationResult(is_valid=False)
        metadata = result.metadata

        for name in cls.REQUIRED_FIELDS:
            value = data.get(name)
            if not isinstance(value, str) or not value.strip():
                result.errors.append(f"Missing or empty required field '{name}' in {filename}")
            else:
                metadata[name] = value.strip()

        for name in cls.OPTIONAL_FIELDS:
            value = data.get(name)
            if isinstance(value, str) and value.strip():
                metadata[name] = value.strip()

        if 'date' in metadata:
            if not DATE_PATTERN.match(metadata['date']):
                result.errors.append(f"Invalid date format in {filename}. Expected YYYY-MM-DD format.")
            elif not is_valid_date(metadata['date']):
                result.errors.append(f"Invalid date value in {filename}. Date cannot be parsed.")
            else:
                metadata['date'] = datetime.strptime(metadata['date'], '%Y-%m-%d').date()

        if 'slug' in metadata:
            slug = slugify(metadata['slug'])
            if slug != metadata['slug']:
                result.warnings.append(f"Slug '{metadata['slug']}' in {filename} normalized to '{slug}'")
            metadata['slug'] = slug
        if not metadata.get('slug') and 'title' in metadata:
            metadata['slug'] = slugify(metadata['title']) or slugify(filename.rsplit('.', 1)[0]) or 'post'
            result.warnings.append(f"Generated slug '{metadata['slug']}' for {filename} (no slug provided)")

        if 'description' not in metadata:
            result.warnings.append(f"Missing description field in {filename}. Consider adding for better SEO.")
            metadata['description'] = metadata.get('title', '')

        metadata['categories'] = cls.parse_categories(data.get('categories'), filename, result)

        result.is_valid = not result.errors
        return result

    @staticmethod
    def parse_categories(value, filename, result):
        if isinstance(value, str) and value.strip():
            return [value.strip()]
        if isinstance(value, list):
            categories = [item.strip() for item in value if isinstance(item, str) and item.strip()]
            if categories:
                return list(dict.fromkeys(categories))
        result.warnings.append(f"No categories in {filename}, using '{DEFAULT_CATEGORY}'")
        return [DEFAULT_CATEGORY]
