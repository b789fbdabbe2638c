import sqlite3
import sqlite_utils
from sqlite_utils.db import NotFoundError
from contextlib import contextmanager
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional
import logging

from ziptales.models import Article, Vote, Votes, VoteDirection
from ziptales.errors import PersistenceError, ArticleNotFoundError

logger = logging.getLogger(__name__)

# Column per direction; never interpolate caller input into SQL
_VOTE_COLUMNS = {
    VoteDirection.UP: "upvotes",
    VoteDirection.DOWN: "downvotes",
}


class InsertResult(Enum):
    OK = "ok"
    ALREADY_EXISTS = "already_exists"


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class Database:
    def __init__(self, db_path: str = "ziptales.db", enabled: bool = True):
        """
        Article store on SQLite.

        Args:
            db_path: Path to SQLite database file, or ":memory:"
            enabled: If False, data lives in memory for this run only
        """
        self.enabled = enabled
        self.db_path = db_path

        if self.enabled and db_path != ":memory:":
            self.db = sqlite_utils.Database(db_path)
            logger.info(f"Database enabled: {db_path}")
        else:
            self.db = sqlite_utils.Database(memory=True)
            logger.info("Database disabled - using in-memory store for this run only")
        self.init_db()

    def init_db(self):
        """Initialize database schema"""
        self.db["articles"].create({
            "id": str,
            "title": str,
            "summary": str,
            "content": str,
            "author": str,
            "source": str,
            "category": str,
            "published_at": str,  # ISO string
            "tags": str,  # JSON list
            "location": str,
            "image_url": str,
            "url": str,
            "credibility_score": int,
            "upvotes": int,
            "downvotes": int,
            "verified": int,  # 0 or 1
        }, pk="id", not_null={"title"},
            defaults={"credibility_score": 50, "upvotes": 0, "downvotes": 0, "verified": 0},
            if_not_exists=True)

        self.db["votes"].create({
            "id": int,
            "user_id": str,
            "article_id": str,
            "direction": str,
            "created_at": str,
        }, pk="id", not_null={"user_id", "article_id", "direction"}, if_not_exists=True)
        # One vote per (user, article), enforced by the database as well
        self.db["votes"].create_index(["user_id", "article_id"], unique=True, if_not_exists=True)

        self.db["saved_articles"].create({
            "user_id": str,
            "article_id": str,
            "created_at": str,
        }, pk=("user_id", "article_id"), if_not_exists=True)

    @contextmanager
    def transaction(self):
        """
        Run a block of store calls as one write transaction.
        BEGIN IMMEDIATE takes the write lock up front, so concurrent
        read-modify-write cycles on the same article are serialized.
        Only the raw-SQL methods below may be used inside the block.
        """
        conn = self.db.conn
        try:
            conn.execute("BEGIN IMMEDIATE")
        except sqlite3.Error as e:
            raise PersistenceError(f"Could not start transaction: {e}") from e
        try:
            yield self
        except sqlite3.Error as e:
            conn.rollback()
            raise PersistenceError(str(e)) from e
        except BaseException:
            conn.rollback()
            raise
        else:
            try:
                conn.commit()
            except sqlite3.Error as e:
                conn.rollback()
                raise PersistenceError(f"Commit failed: {e}") from e

    # Articles

    def article_exists(self, article_id: str) -> bool:
        row = self.db.execute("select 1 from articles where id = ?", [article_id]).fetchone()
        return row is not None

    def get_article(self, article_id: str) -> Optional[Article]:
        try:
            row = self.db["articles"].get(article_id)
        except NotFoundError:
            return None
        return Article.from_row(row)

    def insert_article(self, article: Article) -> bool:
        """Insert a new article. Returns False if the id is already stored."""
        row = article.to_row()
        sql = "insert or ignore into articles ({}) values ({})".format(
            ", ".join(row), ", ".join("?" for _ in row)
        )
        try:
            with self.db.conn:
                cursor = self.db.execute(sql, list(row.values()))
        except sqlite3.Error as e:
            logger.error(f"Error saving article {article.title}: {e}")
            raise PersistenceError(str(e)) from e
        return cursor.rowcount == 1

    def list_articles(self, category: Optional[str] = None) -> List[Article]:
        if category:
            rows = self.db["articles"].rows_where(
                "lower(category) = lower(?)", [category], order_by="published_at desc"
            )
        else:
            rows = self.db["articles"].rows_where(order_by="published_at desc")
        return [Article.from_row(row) for row in rows]

    # Votes

    def has_voted(self, user_id: str, article_id: str) -> bool:
        row = self.db.execute(
            "select 1 from votes where user_id = ? and article_id = ?", [user_id, article_id]
        ).fetchone()
        return row is not None

    def insert_vote(self, user_id: str, article_id: str, direction: VoteDirection) -> InsertResult:
        try:
            self.db.execute(
                "insert into votes (user_id, article_id, direction, created_at) values (?, ?, ?, ?)",
                [user_id, article_id, VoteDirection(direction).value, _now()],
            )
        except sqlite3.IntegrityError:
            return InsertResult.ALREADY_EXISTS
        return InsertResult.OK

    def increment_votes(self, article_id: str, direction: VoteDirection) -> Votes:
        """Atomically add one vote to the matching counter and return the new tallies."""
        column = _VOTE_COLUMNS[VoteDirection(direction)]
        cursor = self.db.execute(
            f"update articles set {column} = {column} + 1 where id = ?", [article_id]
        )
        if cursor.rowcount == 0:
            raise ArticleNotFoundError(article_id)
        upvotes, downvotes = self.db.execute(
            "select upvotes, downvotes from articles where id = ?", [article_id]
        ).fetchone()
        return Votes(upvotes=upvotes, downvotes=downvotes)

    def update_article_votes(self, article_id: str, votes: Votes, score: int):
        cursor = self.db.execute(
            "update articles set upvotes = ?, downvotes = ?, credibility_score = ? where id = ?",
            [votes.upvotes, votes.downvotes, score, article_id],
        )
        if cursor.rowcount == 0:
            raise ArticleNotFoundError(article_id)

    def get_vote(self, user_id: str, article_id: str) -> Optional[Vote]:
        row = self.db.execute(
            "select direction, created_at from votes where user_id = ? and article_id = ?",
            [user_id, article_id],
        ).fetchone()
        if row is None:
            return None
        direction, created_at = row
        return Vote(
            user_id=user_id,
            article_id=article_id,
            direction=VoteDirection(direction),
            created_at=datetime.fromisoformat(created_at) if created_at else None,
        )

    def count_user_votes(self, user_id: str) -> int:
        return self.db["votes"].count_where("user_id = ?", [user_id])

    # Saved articles

    def is_saved(self, user_id: str, article_id: str) -> bool:
        row = self.db.execute(
            "select 1 from saved_articles where user_id = ? and article_id = ?", [user_id, article_id]
        ).fetchone()
        return row is not None

    def toggle_saved(self, user_id: str, article_id: str) -> bool:
        """Flip saved membership. Returns True if the article is now saved."""
        with self.transaction():
            if self.is_saved(user_id, article_id):
                self.db.execute(
                    "delete from saved_articles where user_id = ? and article_id = ?",
                    [user_id, article_id],
                )
                return False
            self.db.execute(
                "insert into saved_articles (user_id, article_id, created_at) values (?, ?, ?)",
                [user_id, article_id, _now()],
            )
            return True

    def saved_article_ids(self, user_id: str) -> List[str]:
        rows = self.db["saved_articles"].rows_where(
            "user_id = ?", [user_id], order_by="created_at, rowid", select="article_id"
        )
        return [row["article_id"] for row in rows]
