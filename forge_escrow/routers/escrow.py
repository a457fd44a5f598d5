"""Escrow lifecycle endpoints."""
from typing import Annotated

from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.orm import Session

from forge_escrow.config import Settings, get_program_config, get_settings
from forge_escrow.db import get_db
from forge_escrow.models.escrow import EscrowEvent, EscrowRecord
from forge_escrow.schemas.escrow import (
    CancelRead,
    CancelRequest,
    EscrowCreate,
    EscrowEventRead,
    EscrowRead,
    ReleaseRead,
    ReleaseRequest,
    RemainingRead,
    MAX_U63,
)
from forge_escrow.security import ApiClient, require_api_key
from forge_escrow.services.escrow import EscrowController

router = APIRouter(
    prefix="/escrows",
    tags=["escrow"],
)

EscrowId = Annotated[int, Path(ge=0, le=MAX_U63)]


def get_controller(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> EscrowController:
    return EscrowController(db, get_program_config(settings))


@router.post("", response_model=EscrowRead, status_code=status.HTTP_201_CREATED)
def initialize_and_fund(
    payload: EscrowCreate,
    controller: EscrowController = Depends(get_controller),
    api_client: ApiClient = Depends(require_api_key),
) -> EscrowRecord:
    return controller.initialize_and_fund(
        payload.escrow_id,
        payload.amount,
        payload.to_asset(),
        arbiter=payload.arbiter,
        recipient=payload.recipient,
        initiator=payload.initiator,
    )


@router.post("/{escrow_id}/release", response_model=ReleaseRead)
def release(
    escrow_id: EscrowId,
    payload: ReleaseRequest,
    controller: EscrowController = Depends(get_controller),
    api_client: ApiClient = Depends(require_api_key),
) -> ReleaseRead:
    result = controller.release(escrow_id, payload.percentage, payload.caller)
    return ReleaseRead(
        escrow_id=escrow_id,
        gross=result.gross,
        net_to_recipient=result.net_to_recipient,
        fee_leg_1=result.fee_leg_1,
        fee_leg_2=result.fee_leg_2,
        dust=result.dust,
        released_amount=result.escrow.released_amount,
        remaining=result.escrow.remaining,
        status=result.escrow.status,
    )


@router.post("/{escrow_id}/cancel", response_model=CancelRead)
def cancel(
    escrow_id: EscrowId,
    payload: CancelRequest,
    controller: EscrowController = Depends(get_controller),
    api_client: ApiClient = Depends(require_api_key),
) -> CancelRead:
    refunded = controller.cancel(escrow_id, payload.caller)
    record = controller.get_escrow(escrow_id)
    return CancelRead(escrow_id=escrow_id, refunded=refunded, status=record.status)


@router.get("/{escrow_id}/remaining", response_model=RemainingRead)
def get_remaining(
    escrow_id: EscrowId,
    controller: EscrowController = Depends(get_controller),
    api_client: ApiClient = Depends(require_api_key),
) -> RemainingRead:
    return RemainingRead(escrow_id=escrow_id, remaining=controller.get_remaining(escrow_id))


@router.get("/{escrow_id}/events", response_model=list[EscrowEventRead])
def list_events(
    escrow_id: EscrowId,
    controller: EscrowController = Depends(get_controller),
    api_client: ApiClient = Depends(require_api_key),
) -> list[EscrowEvent]:
    return controller.list_events(escrow_id)


@router.get("/{escrow_id}", response_model=EscrowRead)
def read_escrow(
    escrow_id: EscrowId,
    controller: EscrowController = Depends(get_controller),
    api_client: ApiClient = Depends(require_api_key),
) -> EscrowRecord:
    return controller.get_escrow(escrow_id)
