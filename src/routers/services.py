from fastapi import HTTPException

from core.service_manager import service_manager
from core.services.command_dispatcher import CommandDispatcher
from core.services.query_service import QueryService


def get_query_service() -> QueryService:
    try:
        service_manager.require_running()
    except RuntimeError as e:
        raise HTTPException(status_code=503, detail=str(e))
    return service_manager.query_service


def get_command_dispatcher() -> CommandDispatcher:
    try:
        service_manager.require_running()
    except RuntimeError as e:
        raise HTTPException(status_code=503, detail=str(e))
    return service_manager.command_dispatcher
