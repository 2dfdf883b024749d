from fastapi import APIRouter, Depends, Response, status

from src.platform.config.core_setting import settings
from src.platform.logging.loguru_io import Logger
from src.service.validation.app.command.clear_cache_use_case import ClearCacheUseCase
from src.service.validation.app.command.force_sync_use_case import ForceSyncUseCase
from src.service.validation.app.command.report_connectivity_use_case import (
    ReportConnectivityUseCase,
)
from src.service.validation.app.command.validate_ticket_use_case import ValidateTicketUseCase
from src.service.validation.app.query.get_sync_status_use_case import GetSyncStatusUseCase
from src.service.validation.app.query.search_tickets_use_case import SearchTicketsUseCase
from src.service.validation.driving_adapter.schema.validator_schema import (
    ClearCacheResponse,
    ConnectivityRequest,
    ConnectivityResponse,
    SyncResponse,
    SyncStatusResponse,
    TicketListResponse,
    TicketResponse,
    ValidateTicketRequest,
    ValidateTicketResponse,
)


router = APIRouter()


# Rejections are business outcomes, so validation always answers 200
@router.post('/validate', status_code=status.HTTP_200_OK)
@Logger.io
async def validate_ticket(
    request: ValidateTicketRequest,
    use_case: ValidateTicketUseCase = Depends(ValidateTicketUseCase.depends),
) -> ValidateTicketResponse:
    result = await use_case.execute(
        code=request.code.strip(),
        validator_id=request.validator_id or settings.VALIDATOR_ID,
    )
    return ValidateTicketResponse.from_result(result)


@router.get('/status', status_code=status.HTTP_200_OK)
@Logger.io
async def get_sync_status(
    use_case: GetSyncStatusUseCase = Depends(GetSyncStatusUseCase.depends),
) -> SyncStatusResponse:
    return SyncStatusResponse.from_status(await use_case.execute())


@router.post('/sync', status_code=status.HTTP_200_OK)
@Logger.io
async def force_sync(
    response: Response,
    use_case: ForceSyncUseCase = Depends(ForceSyncUseCase.depends),
) -> SyncResponse:
    report = await use_case.execute()
    if report is None:
        # Offline or another cycle is already running
        response.status_code = status.HTTP_202_ACCEPTED
    return SyncResponse.from_report(report)


@router.get('/tickets', status_code=status.HTTP_200_OK)
@Logger.io(truncate=True)
async def search_tickets(
    q: str = '',
    use_case: SearchTicketsUseCase = Depends(SearchTicketsUseCase.depends),
) -> TicketListResponse:
    tickets = await use_case.execute(query=q)
    return TicketListResponse(
        total=len(tickets),
        tickets=[TicketResponse.from_entity(ticket) for ticket in tickets],
    )


@router.put('/connectivity', status_code=status.HTTP_200_OK)
@Logger.io
async def report_connectivity(
    request: ConnectivityRequest,
    use_case: ReportConnectivityUseCase = Depends(ReportConnectivityUseCase.depends),
) -> ConnectivityResponse:
    is_online = await use_case.execute(online=request.online)
    return ConnectivityResponse(is_online=is_online)


@router.delete('/cache', status_code=status.HTTP_200_OK)
@Logger.io
async def clear_cache(
    use_case: ClearCacheUseCase = Depends(ClearCacheUseCase.depends),
) -> ClearCacheResponse:
    cleared = await use_case.execute()
    return ClearCacheResponse(cleared=cleared)
