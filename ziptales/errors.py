class ZipTalesError(Exception):
    """Base class for errors surfaced to callers."""


class PersistenceError(ZipTalesError):
    """The article store could not commit a write. Safe to retry."""


class ArticleNotFoundError(ZipTalesError, LookupError):
    def __init__(self, article_id: str):
        super().__init__(f"Article not found: {article_id}")
        self.article_id = article_id
