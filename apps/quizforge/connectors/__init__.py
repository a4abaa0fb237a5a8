from .base import SourceDocument
from .google_search_connector import GoogleSearchClient
from .stackexchange_connector import StackExchangeClient
from .wikipedia_connector import WikipediaClient

__all__ = ["GoogleSearchClient", "SourceDocument", "StackExchangeClient", "WikipediaClient"]
