from contextlib import contextmanager
from flask import current_app
from blockcms.extensions import db

@contextmanager
def transactional():
    """
    Commit the session when the block finishes, roll back and re-raise
    on any error.
    """
    try:
        yield db.session
        db.session.commit()
    except Exception as exc:
        db.session.rollback()
        current_app.logger.debug("Transaction rolled back: %r", exc)
        raise
