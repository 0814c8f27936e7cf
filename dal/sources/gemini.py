import logging

import requests

from dal.exceptions import FetchFailed

logger = logging.getLogger(__name__)

DEFAULT_GEMINI_URL = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_GEMINI_MODEL = "gemini-1.5-flash"


class GeminiClient(object):
    """
    Thin client for the generateContent call of the generative language API.
    """
    def __init__(self, api_key, model=DEFAULT_GEMINI_MODEL, base_url=DEFAULT_GEMINI_URL, timeout=10, session=None):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def generate(self, prompt, stage="generation"):
        """
        Send the prompt and return the stripped text of the first candidate, or None if there is none.
        Network failures, timeouts and error statuses raise FetchFailed for the stage.
        """
        url = "%s/models/%s:generateContent" % (self.base_url, self.model)
        try:
            resp = self.session.post(url, params={"key": self.api_key},
                                     json={"contents": [{"parts": [{"text": prompt}]}]},
                                     timeout=self.timeout)
            resp.raise_for_status()
            body = resp.json()
        except requests.Timeout:
            logger.error("Timed out after %ss calling %s for %s", self.timeout, self.model, stage)
            raise FetchFailed("Timed out calling the analysis service", stage=stage)
        except (requests.RequestException, ValueError) as e:
            logger.exception("Exception calling %s for %s", self.model, stage)
            raise FetchFailed("Analysis service call failed: %s" % e, stage=stage)

        try:
            text = body["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError):
            logger.debug("No usable candidate in the %s response for %s", self.model, stage)
            return None
        return text.strip() if isinstance(text, str) and text.strip() else None
