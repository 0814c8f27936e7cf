import abc


class SourceAdapter(abc.ABC):
    @abc.abstractmethod
    def fetch(self, resource_id, **params):
        """
        Fetch fresh data for the resource identified by resource_id from the external source.
        Return the value or raise an AdapterError; never touch the cache or the broadcast bus.
        """
        pass
