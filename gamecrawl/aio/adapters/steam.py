"""Steam store fetcher.

Fetches ``/app/<id>/`` pages from the Steam store and extracts the app
name, user tags, price and the ids of every other app the page links to.
HTTP failures are mapped onto the transient/permanent split the
traversal engine understands.
"""

import re
from html.parser import HTMLParser
from typing import List, Optional

import httpx

from ...errors import NodeId, PermanentFetchError, TransientFetchError
from ...log import get_logger
from ..core.fetcher import AsyncFetcher
from ..core.node import FetchedNode, unique_links

logger = get_logger(__name__)

STORE_URL = "https://store.steampowered.com"

# Statuses worth another try
TRANSIENT_STATUSES = {408, 425, 429, 500, 502, 503, 504}


class AppPageParser(HTMLParser):
    """Pulls the interesting bits out of a store app page.

    Collects text of the first ``.apphub_AppName`` and ``.price`` elements,
    every ``.app_tag`` and every anchor href.
    """

    CAPTURE_CLASSES = ('apphub_AppName', 'price', 'app_tag')

    def __init__(self):
        super().__init__(convert_charrefs=True)
        self.name: Optional[str] = None
        self.price: Optional[str] = None
        self.tags: List[str] = []
        self.hrefs: List[str] = []
        self._capture: Optional[str] = None
        self._capture_tag: Optional[str] = None
        self._depth = 0
        self._buffer: List[str] = []

    def handle_starttag(self, tag, attrs):
        attrs = dict(attrs)
        if tag == 'a' and attrs.get('href'):
            self.hrefs.append(attrs['href'])

        if self._capture is not None:
            if tag == self._capture_tag:
                self._depth += 1
            return

        classes = (attrs.get('class') or '').split()
        for css_class in self.CAPTURE_CLASSES:
            if css_class in classes:
                self._capture = css_class
                self._capture_tag = tag
                self._depth = 1
                self._buffer = []
                break

    def handle_endtag(self, tag):
        if self._capture is None or tag != self._capture_tag:
            return
        self._depth -= 1
        if self._depth > 0:
            return

        text = ' '.join(''.join(self._buffer).split())
        if self._capture == 'apphub_AppName' and self.name is None:
            self.name = text
        elif self._capture == 'price' and self.price is None:
            self.price = text
        elif self._capture == 'app_tag' and text and text != '+':
            self.tags.append(text)
        self._capture = None
        self._capture_tag = None

    def handle_data(self, data):
        if self._capture is not None:
            self._buffer.append(data)


class SteamStoreFetcher(AsyncFetcher):
    """Fetches game entries from the Steam store web pages.

    The per-request ``timeout`` is independent of any crawl time budget.
    """

    def __init__(
        self,
        base_url: str = STORE_URL,
        timeout: float = 30.0,
        user_agent: str = "gamecrawl/0.1",
        client: Optional[httpx.AsyncClient] = None
    ):
        """Initialize the fetcher.

        Args:
            base_url: Store root URL
            timeout: Per-request timeout in seconds
            user_agent: User-Agent header value
            client: Pre-built client (tests pass one with a MockTransport)
        """
        super().__init__()
        self.base_url = base_url.rstrip('/')
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=timeout,
            headers={'User-Agent': user_agent},
            follow_redirects=True,
            # Skip the age gate on mature titles
            cookies={'birthtime': '0', 'mature_content': '1'},
        )
        self._app_link = re.compile(re.escape(self.base_url) + r"/app/(\d+)(?:/|$|\?)")

    def page_url(self, node_id: NodeId) -> str:
        return f"{self.base_url}/app/{node_id}/"

    async def fetch(self, node_id: NodeId) -> FetchedNode:
        url = self.page_url(node_id)
        self.fetch_count += 1

        try:
            response = await self._client.get(url)
        except httpx.TimeoutException as e:
            raise TransientFetchError(f"Timed out fetching {url}", node_id) from e
        except httpx.TransportError as e:
            raise TransientFetchError(f"Network error fetching {url}: {e}", node_id) from e

        status = response.status_code
        if status in TRANSIENT_STATUSES:
            raise TransientFetchError(f"HTTP {status} for {url}", node_id, status)
        if status >= 400:
            raise PermanentFetchError(f"HTTP {status} for {url}", node_id, status)

        return self.parse(node_id, response.text, url=str(response.url))

    def parse(self, node_id: NodeId, html: str, url: Optional[str] = None) -> FetchedNode:
        """Extract metadata and outbound app ids from a store page.

        Raises:
            PermanentFetchError: If the page has no app name (missing app,
                region lock or an age gate the cookies did not get past)
        """
        parser = AppPageParser()
        parser.feed(html)
        parser.close()

        if not parser.name:
            raise PermanentFetchError(f"No app name found on page for {node_id}", node_id)

        links = unique_links(
            (int(match.group(1)) for match in map(self._app_link.match, parser.hrefs) if match),
            exclude=self._as_app_id(node_id),
        )

        logger.debug("app_page_parsed", node_id=node_id, name=parser.name, links=len(links))
        return FetchedNode(
            metadata={
                'name': parser.name,
                'tags': parser.tags,
                'price': parser.price,
                'url': url or self.page_url(node_id),
            },
            links=links,
        )

    @staticmethod
    def _as_app_id(node_id: NodeId) -> Optional[int]:
        try:
            return int(node_id)
        except (TypeError, ValueError):
            return None

    def get_stats(self) -> dict:
        stats = super().get_stats()
        stats['base_url'] = self.base_url
        return stats

    async def close(self):
        if self._owns_client:
            await self._client.aclose()
