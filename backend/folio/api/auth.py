"""Kite login handshake: redirect to the broker, then store holdings."""

import html
import logging

from fastapi import APIRouter, Depends
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import HTMLResponse, RedirectResponse

from folio.api.deps import get_broker_client, get_rules, get_store
from folio.config import Settings, get_settings
from folio.errors import BadRequestError, FolioError
from folio.models.fund import Account
from folio.services.broker import BrokerClient
from folio.services.classifier import ClassificationRule, classify
from folio.services.store import PortfolioStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


def _page(message: str) -> HTMLResponse:
    return HTMLResponse(f"<html><h1>{html.escape(message)}</h1></html>")


def parse_account(token: str, kind: str) -> Account:
    try:
        return Account(token)
    except ValueError:
        raise BadRequestError(
            f"invalid {kind} path /{kind}/{token}, expected "
            f"(/{kind}/debt or /{kind}/equity)"
        ) from None


# ":path" so that anything under /login/ reaches this handler, not the static files
@router.get("/login/{account:path}")
async def login(
    account: str,
    settings: Settings = Depends(get_settings),
    broker: BrokerClient = Depends(get_broker_client),
):
    try:
        acct = parse_account(account, "login")
    except BadRequestError as e:
        logger.error(f"auth error: {e}")
        return _page(f"Error: {e}")

    url = broker.login_url(settings.credentials_for(acct).api_key)
    return RedirectResponse(url, status_code=301)


@router.get("/auth/{account:path}")
async def auth_redirect(
    account: str,
    request_token: str = "",
    settings: Settings = Depends(get_settings),
    broker: BrokerClient = Depends(get_broker_client),
    store: PortfolioStore = Depends(get_store),
    rules: tuple[ClassificationRule, ...] = Depends(get_rules),
):
    """Broker redirect target; failures render as a 200 HTML error page."""
    try:
        acct = parse_account(account, "auth")
        if not request_token:
            raise BadRequestError("missing request_token")
        creds = settings.credentials_for(acct)
        holdings = await run_in_threadpool(
            broker.list_holdings, creds.api_key, creds.api_secret, request_token
        )
        funds = classify(acct, holdings, rules)
        await run_in_threadpool(store.save, acct, funds)
    except FolioError as e:
        logger.error(f"auth error: {e}")
        return _page(f"Error: {e}")

    logger.info(f"logged in successfully ({acct.value})")
    return _page("Success!")
