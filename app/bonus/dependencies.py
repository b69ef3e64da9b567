import fastapi

from app import config, dependencies
from app.bonus import client_key, repository, service
from app.common import json_store


def get_bonus_repository(
    app_config: config.AppConfig = fastapi.Depends(dependencies.get_app_config),
) -> repository.AbstractBonusRepository:
    store = json_store.get_store(app_config.storage.bonus_store_path)
    return repository.JsonBonusRepository(store=store)


def get_bonus_service(
    bonus_repository: repository.AbstractBonusRepository = fastapi.Depends(
        get_bonus_repository
    ),
) -> service.BonusService:
    return service.BonusService(bonus_repository=bonus_repository)


def get_request_client_key(request: fastapi.Request) -> str:
    peer_host = request.client.host if request.client else None
    return client_key.get_client_key(
        request.headers.get("x-forwarded-for"), peer_host
    )
