"""Reconciliation API Routes"""

from fastapi import APIRouter, Depends, status
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.use_cases.settlement.dtos import ReconciliationResultDTO
from src.depends import get_session, build_reconciler
from src.api.error import ClientError

router = APIRouter(prefix="/reconciliation", tags=["Reconciliation"])


@router.get(
    "",
    response_model=ReconciliationResultDTO,
    status_code=status.HTTP_200_OK,
)
async def reconcile(session: AsyncSession = Depends(get_session)):
    """
    Check stock cash, purchases, loans and payments against their
    transaction history. Read-only.
    """
    result = await build_reconciler(session).execute()

    if result.is_err():
        raise ClientError(result.error)

    return result.value
