"""
Shared plumbing for the postprocessing jobs.

Every job follows the same shape: delete the rows it owns, fetch the
source rows, compute the derived rows and store them. Deletes and
inserts run in separate transactions.
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Iterator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


class PostProcessError(Exception):
    """Raised when a database error aborts a postprocessing job."""

    pass


@dataclass
class PostProcessResult:
    """Counts reported by a finished job."""

    name: str
    deleted: int = 0
    created: int = 0
    skipped: int = 0
    details: dict[str, Any] = field(default_factory=dict)

    def summary(self) -> str:
        parts = [
            f"deleted={self.deleted}",
            f"created={self.created}",
            f"skipped={self.skipped}",
        ]
        parts.extend(f"{key}={value}" for key, value in self.details.items())
        return f"{self.name}: " + ", ".join(parts)


class PostProcessor:
    """Base class for jobs that rewrite derived rows in the warehouse."""

    name = "postprocess"

    def __init__(self, db: Session):
        self.db = db

    def run(self) -> PostProcessResult:
        raise NotImplementedError

    @contextmanager
    def transaction(self, action: str) -> Iterator[None]:
        """
        Run a block as one transaction.

        Commits when the block finishes. Any exception rolls the session
        back; database errors are re-raised as PostProcessError with the
        cause chained, others propagate unchanged.
        """
        try:
            yield
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise PostProcessError(f"{self.name}: {action} failed: {e}") from e
        except Exception:
            self.db.rollback()
            raise

    def delete_all(self, model) -> int:
        """
        Delete every row of a mapped class in its own transaction.

        Rows are loaded and deleted one by one so ORM cascades (for
        instance a feature's locations) are honoured.

        Returns:
            Number of rows deleted
        """
        with self.transaction(f"deleting {model.__name__} records"):
            existing = self.db.query(model).all()
            logger.info(f"Deleting {len(existing)} existing {model.__name__} records...")
            for obj in existing:
                self.db.delete(obj)

        logger.info("...done.")
        return len(existing)
