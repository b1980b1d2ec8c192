from xml.sax.saxutils import escape

from .models import EMPTY_SITE_DATE
from .pages import group_by_category
from .pagination import total_pages

# (changefreq, priority) per kind of URL
ROOT_ENTRY = ('weekly', '1.0')
POST_ENTRY = ('monthly', '0.8')
INDEX_PAGE_ENTRY = ('weekly', '0.7')
CATEGORY_ENTRY = ('weekly', '0.6')


class SitemapGenerator:
    def __init__(self, site_url, posts_per_page=5):
        self.site_url = site_url
        self.posts_per_page = max(1, posts_per_page)

    def collect_urls(self, posts):
        """Return (loc, lastmod, changefreq, priority) tuples in sitemap order."""
        newest = posts[0].date if posts else EMPTY_SITE_DATE
        urls = [(f"{self.site_url}/", newest) + ROOT_ENTRY]

        for post in posts:
            urls.append((f"{self.site_url}/posts/{post.slug}/", post.date) + POST_ENTRY)

        # Page 1 is the root, already listed
        for page in range(2, total_pages(len(posts), self.posts_per_page) + 1):
            page_start = posts[(page - 1) * self.posts_per_page]
            urls.append((f"{self.site_url}/page/{page}/", page_start.date) + INDEX_PAGE_ENTRY)

        for slug, group in group_by_category(posts).items():
            urls.append((f"{self.site_url}/categories/{slug}/", group['posts'][0].date) + CATEGORY_ENTRY)

        return urls

    def generate_content(self, posts) -> str:
        entries = ''.join(
            f"""  <url>
    <loc>{escape(loc)}</loc>
    <lastmod>{lastmod.isoformat()}</lastmod>
    <changefreq>{changefreq}</changefreq>
    <priority>{priority}</priority>
  </url>
"""
            for loc, lastmod, changefreq, priority in self.collect_urls(posts)
        )
        return f"""<?xml version="1.0" encoding="UTF-8"?>
<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">
{entries}</urlset>
"""
