import logging
import os
from typing import Dict, List

from .frontmatter import slugify
from .markup import categories_html, format_date, pagination_html, post_preview_html, seo_meta_html
from .models import BuildOutput
from .pagination import page_dir, page_url, paginate
from .templates import trusted


def group_by_category(posts) -> Dict[str, dict]:
    """
    Map category slug to its display name and posts, in first-seen order.

    The display name is the first label (in post order) that normalizes to
    the slug.
    """
    groups = {}
    for post in posts:
        for category in post.categories:
            slug = slugify(category)
            if not slug:
                continue
            group = groups.setdefault(slug, {'name': category, 'posts': []})
            if post not in group['posts']:
                group['posts'].append(post)
    return groups


class PageGenerator:
    """Produces post pages, the paginated index and category listings."""

    def __init__(self, engine, output_dir, site_title, site_description, site_url,
                 base_path='', posts_per_page=5):
        self.engine = engine
        self.output_dir = output_dir
        self.site_title = site_title
        self.site_description = site_description
        self.site_url = site_url
        self.base_path = base_path
        self.posts_per_page = max(1, posts_per_page)
        self.logger = logging.getLogger('Quire.Pages')

    def output_path(self, *parts):
        return os.path.join(self.output_dir, *parts, 'index.html')

    def generate_all_pages(self, posts) -> List[BuildOutput]:
        self.logger.info("Generating pages...")
        outputs = []
        outputs.extend(self.generate_post_pages(posts))
        outputs.extend(self.generate_index_pages(posts))
        outputs.extend(self.generate_category_pages(posts))
        return outputs

    def generate_post_pages(self, posts):
        outputs = []
        for post in posts:
            seo_meta = seo_meta_html(
                title=f"{post.title} - {self.site_title}",
                description=post.description,
                url=f"{self.site_url}/posts/{post.slug}/",
                page_type='article',
                published_time=post.date_iso,
            )
            html = self.engine.render(
                'post.html',
                title=post.title,
                date=format_date(post.date),
                date_iso=post.date_iso,
                description=post.description,
                content=trusted(post.rendered_content),
                categories=trusted(categories_html(post.categories, self.base_path)),
                seo_meta=trusted(seo_meta),
                site_title=self.site_title,
                base_path=self.base_path,
            )
            outputs.append(BuildOutput(self.output_path('posts', post.slug), html))
        return outputs

    def generate_listing(self, template_name, posts, root, title, description, extra_dir=(), **context):
        """Render every page of one paginated listing rooted at root."""
        outputs = []
        for pagination, page_posts in paginate(posts, self.posts_per_page, root):
            page = pagination.current_page
            page_title = title if page == 1 else f"{title} - Page {page}"
            url_path = page_url(root, page)
            seo_meta = seo_meta_html(
                title=page_title,
                description=description,
                url=f"{self.site_url}{url_path}",
            )
            html = self.engine.render(
                template_name,
                title=page_title,
                posts=trusted(''.join(post_preview_html(p, self.base_path) for p in page_posts)),
                pagination=trusted(pagination_html(pagination, self.base_path)),
                seo_meta=trusted(seo_meta),
                site_title=self.site_title,
                base_path=self.base_path,
                **context
            )
            outputs.append(BuildOutput(self.output_path(*extra_dir, *page_dir(page)), html))
        return outputs

    def generate_index_pages(self, posts):
        return self.generate_listing('index.html', posts, '/', self.site_title, self.site_description)

    def generate_category_pages(self, posts):
        outputs = []
        for slug, group in group_by_category(posts).items():
            name = group['name']
            outputs.extend(self.generate_listing(
                'category.html',
                group['posts'],
                f"/categories/{slug}/",
                f"{name} - {self.site_title}",
                f"Posts in {name} category",
                extra_dir=('categories', slug),
                category_name=name,
            ))
        return outputs
