from dal.models import ImageVerification
from dal.sources.source import SourceAdapter

NO_RESULT = "No result"


class ImageVerifier(SourceAdapter):
    """
    Ask the language model whether an image shows manipulation or a real disaster.
    """
    def __init__(self, gemini):
        self.gemini = gemini

    def fetch(self, resource_id, image_url=None, **params):
        prompt = "Analyze image at %s for signs of manipulation or natural disaster context." % image_url
        return ImageVerification(result=self.gemini.generate(prompt, stage="image verification") or NO_RESULT)
