import fastapi
import httpx

from app import config, dependencies
from app.telegram import relay


def get_message_relay(
    client: httpx.AsyncClient = fastapi.Depends(dependencies.get_http_client),
    app_config: config.AppConfig = fastapi.Depends(dependencies.get_app_config),
) -> relay.AbstractMessageRelay:
    return relay.TelegramRelay(
        http_client=client,
        bot_token=app_config.telegram.bot_token,
        chat_id=app_config.telegram.chat_id,
        api_url=app_config.telegram.api_url,
    )
