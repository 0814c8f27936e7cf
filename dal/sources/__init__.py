__all__ = ["source", "gemini", "geocoder", "social_feed", "official_updates", "image_verifier"]

from .source import SourceAdapter
from .gemini import GeminiClient
from .geocoder import Geocoder
from .social_feed import SocialMediaFeed
from .official_updates import OfficialUpdatesScraper
from .image_verifier import ImageVerifier
