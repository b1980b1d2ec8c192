"""
RSS 2.0 and Atom 1.0 feeds over the most recent posts.

Timestamps come from post dates (midnight UTC), so rebuilding unchanged
sources yields identical feeds.
"""

import calendar
from datetime import date
from email.utils import formatdate
from xml.sax.saxutils import escape, quoteattr

from .models import EMPTY_SITE_DATE

FEED_LIMIT = 10
GENERATOR_NAME = 'Quire'
GENERATOR_URI = 'https://github.com/quire-ssg/quire'


def cdata(text):
    """Wrap text in a CDATA section, splitting any embedded terminator."""
    return '<![CDATA[' + str(text).replace(']]>', ']]]]><![CDATA[>') + ']]>'


def rfc1123(value: date) -> str:
    return formatdate(calendar.timegm(value.timetuple()), usegmt=True)


def iso8601(value: date) -> str:
    return f"{value.isoformat()}T00:00:00Z"


class FeedGenerator:
    def __init__(self, site_title, site_description, site_url, language='en-us', version='1.0.0'):
        self.site_title = site_title
        self.site_description = site_description
        self.site_url = site_url
        self.language = language
        self.version = version

    def post_url(self, post):
        return f"{self.site_url}/posts/{post.slug}/"

    def reference_date(self, posts):
        return posts[0].date if posts else EMPTY_SITE_DATE

    def generate_rss(self, posts) -> str:
        latest = list(posts[:FEED_LIMIT])
        build_date = rfc1123(self.reference_date(latest))

        items = []
        for post in latest:
            url = escape(self.post_url(post))
            items.append(f"""    <item>
      <title>{cdata(post.title)}</title>
      <description>{cdata(post.description)}</description>
      <link>{url}</link>
      <guid isPermaLink="true">{url}</guid>
      <pubDate>{rfc1123(post.date)}</pubDate>
    </item>""")
        items_xml = '\n'.join(items)
        if items_xml:
            items_xml += '\n'

        return f"""<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0" xmlns:atom="http://www.w3.org/2005/Atom">
  <channel>
    <title>{cdata(self.site_title)}</title>
    <description>{cdata(self.site_description)}</description>
    <link>{escape(self.site_url)}</link>
    <atom:link href={quoteattr(self.site_url + '/feed.xml')} rel="self" type="application/rss+xml"/>
    <language>{escape(self.language)}</language>
    <lastBuildDate>{build_date}</lastBuildDate>
    <pubDate>{build_date}</pubDate>
    <ttl>60</ttl>
{items_xml}  </channel>
</rss>
"""

    def generate_atom(self, posts) -> str:
        latest = list(posts[:FEED_LIMIT])
        updated = iso8601(self.reference_date(latest))

        entries = []
        for post in latest:
            url = self.post_url(post)
            entries.append(f"""  <entry>
    <title type="html">{cdata(post.title)}</title>
    <link href={quoteattr(url)}/>
    <updated>{iso8601(post.date)}</updated>
    <id>{escape(url)}</id>
    <content type="html">{cdata(post.rendered_content)}</content>
    <summary type="html">{cdata(post.description)}</summary>
  </entry>""")
        entries_xml = '\n'.join(entries)
        if entries_xml:
            entries_xml += '\n'

        return f"""<?xml version="1.0" encoding="utf-8"?>
<feed xmlns="http://www.w3.org/2005/Atom">
  <title type="text">{escape(self.site_title)}</title>
  <link href={quoteattr(self.site_url + '/atom.xml')} rel="self"/>
  <link href={quoteattr(self.site_url + '/')}/>
  <updated>{updated}</updated>
  <id>{escape(self.site_url)}/</id>
  <subtitle type="html">{cdata(self.site_description)}</subtitle>
  <generator uri={quoteattr(GENERATOR_URI)} version={quoteattr(self.version)}>{GENERATOR_NAME}</generator>
{entries_xml}</feed>
"""
