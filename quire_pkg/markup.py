"""HTML fragments shared by the page generators."""

from html import escape

from .frontmatter import slugify


def format_date(value):
    """Format a date for display."""
    return value.strftime('%B %d, %Y')


def category_url(base_path, category):
    return f"{base_path}/categories/{slugify(category)}/"


def categories_html(categories, base_path=''):
    """Links to category listings. Labels with no usable slug have no listing and are left out."""
    return ' '.join(
        f'<a href="{escape(category_url(base_path, cat))}" class="category-tag">{escape(cat)}</a>'
        for cat in categories
        if slugify(cat)
    )


def post_preview_html(post, base_path=''):
    return f"""
      <article class="post-preview">
        <h2><a href="{escape(base_path)}/posts/{escape(post.slug)}/">{escape(post.title)}</a></h2>
        <div class="post-meta">
          <time datetime="{post.date_iso}">{format_date(post.date)}</time>
          <div class="post-categories">{categories_html(post.categories, base_path)}</div>
        </div>
        <p class="post-description">{escape(post.description)}</p>
      </article>
    """


def pagination_html(pagination, base_path=''):
    """Navigation between listing pages; empty when there is only one page."""
    if pagination.total_pages <= 1:
        return ''

    parts = ['<nav class="pagination">']
    if pagination.has_prev:
        parts.append(f'<a href="{escape(base_path + pagination.prev_url)}" class="pagination-prev">&larr; Previous</a>')
    parts.append(
        f'<span class="pagination-info">Page {pagination.current_page} of {pagination.total_pages}</span>'
    )
    if pagination.has_next:
        parts.append(f'<a href="{escape(base_path + pagination.next_url)}" class="pagination-next">Next &rarr;</a>')
    parts.append('</nav>')
    return ''.join(parts)


def seo_meta_html(title, description, url, page_type='website', author=None, published_time=None):
    """Description, canonical, Open Graph and Twitter card tags."""
    meta = [
        f'<meta name="description" content="{escape(description)}">',
        f'<link rel="canonical" href="{escape(url)}">',
        f'<meta property="og:title" content="{escape(title)}">',
        f'<meta property="og:description" content="{escape(description)}">',
        f'<meta property="og:url" content="{escape(url)}">',
        f'<meta property="og:type" content="{page_type}">',
        '<meta name="twitter:card" content="summary">',
        f'<meta name="twitter:title" content="{escape(title)}">',
        f'<meta name="twitter:description" content="{escape(description)}">',
    ]
    if author:
        meta.append(f'<meta name="author" content="{escape(author)}">')
    if published_time:
        meta.append(f'<meta property="article:published_time" content="{escape(published_time)}">')
    return '\n    '.join(meta)
