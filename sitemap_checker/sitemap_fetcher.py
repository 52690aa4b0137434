"""
1.0 Sitemap Fetcher Module
Fetches XML sitemap content from URLs.

Key features:
- Single attempt per sitemap; any failure is reported as None
- Configurable timeout and user agent
- Session reuse for connection pooling
- Recursive collection of page URLs through sitemap indexes
"""

import logging
from typing import Optional, Dict, Any, List, Set

import requests
from requests.adapters import HTTPAdapter

from sitemap_checker.sitemap_parser import SitemapParser

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "SitemapStatusChecker/1.0"


class SitemapFetcher:
    """
    2.0 SitemapFetcher Class
    Fetches sitemap XML content over a shared session.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None, session: Optional[requests.Session] = None):
        """
        2.1 Initialize the SitemapFetcher.

        Args:
            config: Configuration dictionary with optional keys:
                - user_agent: Custom user agent string
                - timeout: Request timeout in seconds (default: 30)
            session: Preconfigured session (mainly for tests)
        """
        config = config or {}

        self.user_agent = config.get("user_agent") or DEFAULT_USER_AGENT
        if not isinstance(self.user_agent, str) or not self.user_agent.strip():
            self.user_agent = DEFAULT_USER_AGENT
            logger.warning(f"Invalid user_agent in config. Using default: {self.user_agent}")

        self.timeout = config.get("timeout") or 30

        self.session = session or self._create_session()

        logger.info(
            f"SitemapFetcher initialized: "
            f"User-Agent={self.user_agent[:50]}, "
            f"timeout={self.timeout}s"
        )

    def _create_session(self) -> requests.Session:
        """2.2 Create a requests Session with a pooled adapter and default headers."""
        session = requests.Session()

        adapter = HTTPAdapter(max_retries=0)
        session.mount("http://", adapter)
        session.mount("https://", adapter)

        session.headers.update({"User-Agent": self.user_agent})

        return session

    def fetch_sitemap_xml(self, sitemap_url: str, timeout: Optional[int] = None) -> Optional[str]:
        """
        2.3 Fetch XML content from a sitemap URL.

        Args:
            sitemap_url: The URL of the sitemap to fetch
            timeout: Optional override for request timeout

        Returns:
            XML content as string if successful, None otherwise
        """
        if not sitemap_url or not sitemap_url.startswith(("http://", "https://")):
            logger.error(f"Invalid sitemap URL: {sitemap_url}")
            return None

        timeout = timeout or self.timeout

        logger.info(f"Fetching sitemap: {sitemap_url}")

        try:
            response = self.session.get(sitemap_url, timeout=timeout)

            if response.status_code == 200:
                logger.info(
                    f"Successfully fetched {sitemap_url} "
                    f"(status={response.status_code}, size={len(response.text):,} bytes)"
                )
                return response.text

            logger.error(f"Failed to fetch {sitemap_url}: status={response.status_code}")
            return None

        except requests.exceptions.Timeout:
            logger.error(f"Timeout fetching {sitemap_url} after {timeout}s")
            return None

        except requests.exceptions.ConnectionError as e:
            logger.error(f"Connection error fetching {sitemap_url}: {e}")
            return None

        except requests.exceptions.RequestException as e:
            logger.error(f"Request error fetching {sitemap_url}: {e}")
            return None


def collect_page_urls(
    sitemap_url: str,
    fetcher: SitemapFetcher,
    parser: SitemapParser,
    processed_sitemap_urls: Optional[Set[str]] = None,
) -> Optional[List[str]]:
    """
    3.0 Fetch and parse a sitemap, following sitemap indexes recursively.

    Args:
        sitemap_url: URL of the sitemap (index or urlset)
        fetcher: SitemapFetcher instance
        parser: SitemapParser instance
        processed_sitemap_urls: Sitemaps already visited in this walk

    Returns:
        Page URLs in document order, or None if the top-level sitemap could
        not be fetched or parsed. Broken child sitemaps are skipped.
    """
    top_level = processed_sitemap_urls is None
    if top_level:
        processed_sitemap_urls = set()

    if sitemap_url in processed_sitemap_urls:
        logger.info(f"Sitemap {sitemap_url} already processed. Skipping.")
        return []
    processed_sitemap_urls.add(sitemap_url)

    xml_content = fetcher.fetch_sitemap_xml(sitemap_url)
    if not xml_content:
        logger.warning(f"Failed to fetch XML content for {sitemap_url}.")
        return None if top_level else []

    parsed_data = parser.parse_sitemap(xml_content, sitemap_url=sitemap_url)

    if parsed_data["type"] == "urlset":
        page_urls = parsed_data.get("urls") or []
        logger.info(f"URL set {sitemap_url} contains {len(page_urls)} page URLs.")
        return list(page_urls)

    if parsed_data["type"] == "sitemapindex":
        sub_sitemaps = parsed_data.get("urls") or []
        logger.info(f"Sitemap index {sitemap_url} contains {len(sub_sitemaps)} sub-sitemaps.")

        page_urls = []
        for sub_url in sub_sitemaps:
            page_urls.extend(
                collect_page_urls(sub_url, fetcher, parser, processed_sitemap_urls) or []
            )
        return page_urls

    logger.error(f"Error parsing sitemap {sitemap_url}: {parsed_data.get('error_message')}")
    return None if top_level else []
