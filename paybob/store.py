from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from paybob.errors import StoreError
from paybob.log import get_logger

logger = get_logger(__name__)


class RecordStore:
    """
    Typed record storage over a SQLAlchemy session.

    Every write commits immediately. A failed commit is rolled back so the
    attempted change never becomes visible, and is reported as a StoreError.
    """

    def __init__(self, session: Session):
        self.session = session

    def insert(self, *records):
        for record in records:
            self.session.add(record)
        self.commit()
        return records[0] if len(records) == 1 else records

    def delete(self, record):
        # Children are removed through the parents' delete-orphan cascades
        self.session.delete(record)
        self.commit()

    def query(self, model, *criteria, order_by=None) -> list:
        q = self.session.query(model)
        if criteria:
            q = q.filter(*criteria)
        if order_by is not None:
            q = q.order_by(order_by)
        return q.all()

    def get(self, model, record_id):
        return self.session.get(model, record_id)

    def commit(self):
        try:
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error("store_commit_failed", error=str(e))
            raise StoreError("could not save changes", original=e) from e
