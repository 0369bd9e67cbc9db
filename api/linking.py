# api/linking.py
"""
Account linking, called by the web app with the signed-in account id.

- POST /auth                  token from a link opened in Telegram (/link)
- POST /verify-telegram-code  6-character code shown by /start
"""

from typing import Any, Dict

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse

from api.dependencies import Services, get_services
from models.identity import LinkKind, RedeemStatus

router = APIRouter()


def _failure(message: str) -> JSONResponse:
    return JSONResponse({"success": False, "message": message}, status_code=400)


async def _redeem(
    services: Services, body: Dict[str, Any], token_key: str, label: str, kind: LinkKind
) -> JSONResponse:
    token = body.get(token_key)
    account_id = body.get("userId")
    if not token:
        return _failure(f"{label} is required")
    if not account_id:
        return _failure("User ID is required")

    status = await services.linker.redeem_link_token(str(token), str(account_id), kind)
    if status is not RedeemStatus.SUCCESS:
        return _failure(status.message)
    return JSONResponse({"success": True})


@router.post("/auth")
async def redeem_link_token(
    body: Dict[str, Any] = Body(...),
    services: Services = Depends(get_services),
) -> JSONResponse:
    return await _redeem(services, body, "token", "Token", LinkKind.TOKEN)


@router.post("/verify-telegram-code")
async def verify_telegram_code(
    body: Dict[str, Any] = Body(...),
    services: Services = Depends(get_services),
) -> JSONResponse:
    return await _redeem(services, body, "code", "Code", LinkKind.CODE)
