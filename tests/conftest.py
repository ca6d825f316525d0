"""Shared test fixtures for RSS Notify Agent tests."""

import asyncio

import httpx
import pytest

from rssnotify_agent.read_state import ReadStateStore


SAMPLE_RSS_XML = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0">
  <channel>
    <title>Test Feed</title>
    <link>https://example.com</link>
    <description>A test RSS feed</description>
    <item>
      <title>First Article</title>
      <link>https://example.com/article-1</link>
      <guid>article-1</guid>
      <description>Description of the first article</description>
      <pubDate>Fri, 13 Feb 2026 10:00:00 GMT</pubDate>
    </item>
    <item>
      <title>Second Article</title>
      <link>https://example.com/article-2</link>
      <guid>article-2</guid>
      <description>Description of the second article</description>
      <pubDate>Fri, 13 Feb 2026 09:00:00 GMT</pubDate>
    </item>
  </channel>
</rss>"""

SAMPLE_ATOM_XML = """<?xml version="1.0" encoding="UTF-8"?>
<feed xmlns="http://www.w3.org/2005/Atom">
  <title>Test Atom Feed</title>
  <link href="https://example.com"/>
  <subtitle>A test Atom feed</subtitle>
  <entry>
    <title>Atom Entry 1</title>
    <link href="https://example.com/entry-1"/>
    <id>urn:uuid:entry-1</id>
    <summary>Summary of entry 1</summary>
    <updated>2026-02-13T10:00:00Z</updated>
  </entry>
</feed>"""

SAMPLE_NO_LINK_NO_DATE_RSS = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0">
  <channel>
    <title>Bare Feed</title>
    <item>
      <title>Orphan Item</title>
      <guid isPermaLink="false">orphan-1</guid>
    </item>
  </channel>
</rss>"""

SAMPLE_NOT_A_FEED_HTML = """<!DOCTYPE html>
<html>
  <head><title>502 Bad Gateway</title></head>
  <body><h1>Something went wrong</h1></body>
</html>"""


def resolved_future():
    """A future that is already done, for notifications closed at once."""
    future = asyncio.get_running_loop().create_future()
    future.set_result(None)
    return future


# 2026-02-13T10:00:00Z and 09:00:00Z
FIRST_ARTICLE_TS = 1770976800
SECOND_ARTICLE_TS = 1770973200


class FakeNotifier:
    """Records presented notifications instead of showing them."""

    def __init__(self):
        self.presented: list[tuple[str, str]] = []
        self.actions = []

    async def present(self, title, body, on_default):
        self.presented.append((title, body))
        self.actions.append(on_default)
        return resolved_future()

    def check(self):
        pass


def make_client(routes: dict[str, tuple[int, str]]) -> httpx.Client:
    """Build an httpx client answering from a url -> (status, body) map."""

    def handler(request: httpx.Request) -> httpx.Response:
        status, body = routes.get(str(request.url), (404, "not found"))
        return httpx.Response(status, text=body)

    return httpx.Client(transport=httpx.MockTransport(handler))


@pytest.fixture
def read_state_path(tmp_path):
    """Provide a path for a fresh read-state file."""
    return tmp_path / "read"


@pytest.fixture
def store(read_state_path):
    return ReadStateStore(read_state_path)


@pytest.fixture
def notifier():
    return FakeNotifier()


@pytest.fixture
def sample_rss_xml():
    """Sample valid RSS 2.0 XML."""
    return SAMPLE_RSS_XML


@pytest.fixture
def sample_atom_xml():
    """Sample valid Atom XML."""
    return SAMPLE_ATOM_XML


@pytest.fixture
def sample_not_a_feed_html():
    """Sample HTML error page."""
    return SAMPLE_NOT_A_FEED_HTML
