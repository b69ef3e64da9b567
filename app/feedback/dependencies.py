import fastapi

from app import config, dependencies
from app.common import json_store
from app.feedback import repository, service
from app.telegram import dependencies as telegram_dependencies
from app.telegram import relay


def get_feedback_store(
    app_config: config.AppConfig = fastapi.Depends(dependencies.get_app_config),
) -> json_store.JsonDocumentStore:
    return json_store.get_store(app_config.storage.feedback_store_path)


def get_feedback_repository(
    store: json_store.JsonDocumentStore = fastapi.Depends(get_feedback_store),
) -> repository.AbstractFeedbackRepository:
    return repository.JsonFeedbackRepository(store=store)


def get_feedback_service(
    feedback_repository: repository.AbstractFeedbackRepository = fastapi.Depends(
        get_feedback_repository
    ),
    message_relay: relay.AbstractMessageRelay = fastapi.Depends(
        telegram_dependencies.get_message_relay
    ),
    app_config: config.AppConfig = fastapi.Depends(dependencies.get_app_config),
) -> service.FeedbackService:
    return service.FeedbackService(
        feedback_repository=feedback_repository,
        message_relay=message_relay,
        urgent_keywords=app_config.policy.urgent_keywords,
        department_tag_charset=app_config.policy.department_tag_charset,
    )
