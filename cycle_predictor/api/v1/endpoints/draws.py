"""Draw history API endpoints."""

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from cycle_predictor.api.deps import get_db
from cycle_predictor.db.crud import draw as crud
from cycle_predictor.schemas.draw import DrawRecordSchema, PaginatedDrawResponse

router = APIRouter()


@router.get("", response_model=PaginatedDrawResponse)
async def list_draws(
    page: int = Query(1, ge=1),
    page_size: int = Query(50, ge=1, le=500),
    date_from: date | None = None,
    date_to: date | None = None,
    db: AsyncSession = Depends(get_db),
):
    """Stored draws, newest first, optionally limited to a date range."""
    if date_from and date_to and date_from > date_to:
        raise HTTPException(status_code=422, detail="date_from is after date_to")
    draws, total = await crud.get_draws(
        db, page=page, page_size=page_size, date_from=date_from, date_to=date_to,
    )
    total_pages = (total + page_size - 1) // page_size if total > 0 else 0
    return PaginatedDrawResponse(
        items=[DrawRecordSchema.model_validate(d) for d in draws],
        total=total,
        page=page,
        page_size=page_size,
        total_pages=total_pages,
        has_more=(page - 1) * page_size + len(draws) < total,
    )


@router.get("/latest", response_model=DrawRecordSchema)
async def get_latest(db: AsyncSession = Depends(get_db)):
    draw = await crud.get_latest(db)
    if not draw:
        raise HTTPException(status_code=404, detail="No draws stored yet")
    return DrawRecordSchema.model_validate(draw)


@router.get("/{draw_id}", response_model=DrawRecordSchema)
async def get_draw(draw_id: str, db: AsyncSession = Depends(get_db)):
    draw = await crud.get_by_draw_id(db, draw_id)
    if not draw:
        raise HTTPException(status_code=404, detail="Draw not found")
    return DrawRecordSchema.model_validate(draw)
