from collections.abc import Generator

from fastapi import Depends
from sqlalchemy.orm import Session

from app.db.session import SessionLocal
from app.services.substitute_store import SqlSubstituteStore
from app.services.substitution import SubstitutionResolver


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_substitute_store(db: Session = Depends(get_db)) -> SqlSubstituteStore:
    return SqlSubstituteStore(db)


def get_substitution_resolver(
    store: SqlSubstituteStore = Depends(get_substitute_store),
) -> SubstitutionResolver:
    return SubstitutionResolver(store)
