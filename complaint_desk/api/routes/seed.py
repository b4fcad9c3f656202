from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from complaint_desk.api.deps import get_db
from complaint_desk.core.config import settings
from complaint_desk.core.exceptions import NotFoundError
from complaint_desk.db.seed import seed_demo_data

router = APIRouter()


@router.post("")
def seed(
    db: Session = Depends(get_db),
) -> dict:
    """Load demo departments and accounts. Only available with ENABLE_DEMO_SEED."""
    if not settings.ENABLE_DEMO_SEED:
        raise NotFoundError("Route", "/seed")
    seed_demo_data(db)
    return {"message": "Seed successful"}
