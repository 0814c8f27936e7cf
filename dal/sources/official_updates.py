import logging
from html.parser import HTMLParser

import requests

from dal.exceptions import FetchFailed
from dal.models import OfficialUpdate
from dal.sources.source import SourceAdapter

logger = logging.getLogger(__name__)

DEFAULT_OFFICIAL_UPDATES_URL = "https://www.fema.gov/press-releases"

# Anchors with shorter text are navigation (Home, Contact us, ...) rather than headlines.
MIN_TITLE_LENGTH = 20


class AnchorExtractor(HTMLParser):
    """
    Collect (text, href) for every anchor in the document.
    """
    def __init__(self):
        super().__init__(convert_charrefs=True)
        self.anchors = []
        self._href = None
        self._text = []
        self._depth = 0

    def handle_starttag(self, tag, attrs):
        if tag == "a":
            if self._depth == 0:
                self._href = dict(attrs).get("href")
                self._text = []
            self._depth += 1

    def handle_endtag(self, tag):
        if tag == "a" and self._depth:
            self._depth -= 1
            if self._depth == 0:
                self.anchors.append((" ".join("".join(self._text).split()), self._href))

    def handle_data(self, data):
        if self._depth:
            self._text.append(data)


def extract_updates(html, min_title_length=MIN_TITLE_LENGTH):
    parser = AnchorExtractor()
    parser.feed(html)
    parser.close()
    return [OfficialUpdate(title=title, url=href) for title, href in parser.anchors if len(title) > min_title_length and href]


class OfficialUpdatesScraper(SourceAdapter):
    """
    Scrape the headlines off an official press release page.
    """
    def __init__(self, url=DEFAULT_OFFICIAL_UPDATES_URL, timeout=10, min_title_length=MIN_TITLE_LENGTH, session=None):
        self.url = url
        self.timeout = timeout
        self.min_title_length = min_title_length
        self.session = session or requests.Session()

    def fetch(self, resource_id, **params):
        try:
            resp = self.session.get(self.url, timeout=self.timeout)
            resp.raise_for_status()
        except requests.RequestException as e:
            logger.exception("Exception fetching official updates from %s", self.url)
            raise FetchFailed("Fetching official updates failed: %s" % e, stage="scrape")
        updates = extract_updates(resp.text, self.min_title_length)
        logger.debug("Found %s official updates at %s", len(updates), self.url)
        return updates
