"""
Error translation shared by the routers.

Services raise ValueError with a readable message. A message
ending in "not found" means the path named something that does
not exist (404); every other rule violation is a bad request
(400). MalformedInputError is handled app-wide in main.py.
"""

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse

from ledger_core.errors import MalformedInputError


def to_http_error(error: ValueError) -> HTTPException:
    message = str(error)
    status_code = 404 if message.endswith("not found") else 400
    return HTTPException(status_code=status_code, detail=message)


async def malformed_input_handler(request: Request, exc: MalformedInputError) -> JSONResponse:
    """Stored data the engine refused to total: 422 with the offending record."""
    return JSONResponse(status_code=422, content=exc.to_dict())
