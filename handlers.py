from fastapi import Request, Response
from fastapi.responses import ORJSONResponse
from pydantic import ValidationError
import json
import logging
import re

from errors import BadRequest, NotFound, StoreError
from models import PasteFound
from models_sql import PasteRepository
from schemas import PasteCreate, PasteUpdate

logger = logging.getLogger(__name__)

# Seconds a handler gives the store to answer
REQUEST_TIMEOUT = 10

_ID_PATTERN = re.compile(r'[+-]?[0-9]+')

# pastes.id is a 32-bit INTEGER column
ID_MIN = -2**31
ID_MAX = 2**31 - 1


def get_repository(request: Request) -> PasteRepository:
    return request.app.state.repository


def error_response(status_code: int, message) -> ORJSONResponse:
    return ORJSONResponse(status_code=status_code, content={"message": message})


def parse_id(request: Request) -> int:
    id_str = request.query_params.get("id")
    if not id_str:
        raise BadRequest("id parameter is required")
    if not _ID_PATTERN.fullmatch(id_str):
        raise BadRequest("invalid id format")
    paste_id = int(id_str)
    if not ID_MIN <= paste_id <= ID_MAX:
        raise BadRequest("id out of range")
    return paste_id


async def parse_body(request: Request, model):
    body = await request.body()
    try:
        data = json.loads(body)
    except ValueError:
        raise BadRequest("Request body not compatible JSON format")
    try:
        return model.model_validate(data)
    except ValidationError:
        raise BadRequest("content must be a UTF-8 string")


async def create_paste_handler(request: Request):
    try:
        paste_in = await parse_body(request, PasteCreate)
    except BadRequest as e:
        logger.debug("rejected create: %s", e.message)
        return error_response(400, e.message)

    try:
        paste = await get_repository(request).create(paste_in.content, timeout=REQUEST_TIMEOUT)
    except StoreError as e:
        return error_response(500, e.message)

    return ORJSONResponse(status_code=201, content=paste.to_json())


async def get_paste_handler(request: Request):
    try:
        paste_id = parse_id(request)
    except BadRequest as e:
        logger.debug("rejected get: %s", e.message)
        return error_response(400, e.message)

    try:
        result = await get_repository(request).get_by_id(paste_id, timeout=REQUEST_TIMEOUT)
    except StoreError as e:
        return error_response(500, e.message)

    if not isinstance(result, PasteFound):
        return error_response(404, "paste not found")
    return ORJSONResponse(content=result.paste.to_json())


async def update_paste_handler(request: Request):
    try:
        paste_id = parse_id(request)
        paste_in = await parse_body(request, PasteUpdate)
    except BadRequest as e:
        logger.debug("rejected update: %s", e.message)
        return error_response(400, e.message)

    try:
        paste = await get_repository(request).update(paste_id, paste_in.content, timeout=REQUEST_TIMEOUT)
    except NotFound:
        return error_response(404, "paste not found")
    except StoreError as e:
        return error_response(500, e.message)

    return ORJSONResponse(content=paste.to_json())


async def delete_paste_handler(request: Request):
    try:
        paste_id = parse_id(request)
    except BadRequest as e:
        logger.debug("rejected delete: %s", e.message)
        return error_response(400, e.message)

    try:
        await get_repository(request).delete(paste_id, timeout=REQUEST_TIMEOUT)
    except NotFound:
        return error_response(404, "paste not found")
    except StoreError as e:
        return error_response(500, e.message)

    return Response(status_code=204)


async def list_pastes_handler(request: Request):
    try:
        rows = await get_repository(request).get_all(timeout=REQUEST_TIMEOUT)
    except StoreError as e:
        return error_response(500, e.message)

    return ORJSONResponse(content=[p.to_json() for p in rows])


async def health_handler(request: Request):
    try:
        await get_repository(request).ping(timeout=REQUEST_TIMEOUT)
    except StoreError:
        return error_response(500, {"status": "error", "db_status": "unreachable"})
    return {"status": "ok", "db_status": "ok"}
