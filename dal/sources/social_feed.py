from dal.models import SocialMediaPost
from dal.sources.source import SourceAdapter

MOCK_POSTS = [
    {"post": "#floodrelief Need urgent medical aid in Andheri", "user": "citizen1"},
    {"post": "#flood Water rising near Andheri West bridge", "user": "citizen2"},
]


class SocialMediaFeed(SourceAdapter):
    """
    Stand in for a live social media API; every disaster gets the same posts.
    """
    def __init__(self, posts=None):
        self.posts = posts if posts is not None else MOCK_POSTS

    def fetch(self, resource_id, **params):
        return [SocialMediaPost(**x) for x in self.posts]
