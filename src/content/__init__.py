"""Content domain: articles and guides, their stores, cache and loaders.

Collections are read from disk by a ``CollectionStore``, held in memory
by a ``ContentCache`` snapshot, and queried through a ``ContentLoader``
that also ranks related items.
"""

from sitecontent.content.cache import CacheSnapshot, ContentCache
from sitecontent.content.loaders import ArticleLoader, ContentLoader, GuideLoader
from sitecontent.content.models import (
    Article,
    Author,
    Category,
    ContentItem,
    Guide,
    GuidePart,
)
from sitecontent.content.related import RelatednessScorer
from sitecontent.content.store import ArticleStore, CollectionStore, GuideStore

__all__ = [
    "Article",
    "ArticleLoader",
    "ArticleStore",
    "Author",
    "CacheSnapshot",
    "Category",
    "CollectionStore",
    "ContentCache",
    "ContentItem",
    "ContentLoader",
    "Guide",
    "GuideLoader",
    "GuidePart",
    "GuideStore",
    "RelatednessScorer",
]
