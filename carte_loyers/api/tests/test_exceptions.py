import json

import pytest
from fastapi.exceptions import RequestValidationError
from starlette.requests import Request

from carte_loyers.api.utils.exception_handlers import (
    carte_loyers_exception_handler, general_exception_handler,
    validation_exception_handler)
from carte_loyers.api.utils.exceptions import (DownloadFailed, EmptyDataset,
                                               MissingColumnsError,
                                               NoResourceFound,
                                               TransportFailure,
                                               UpstreamStatusFailure)


def make_request() -> Request:
    return Request(
        scope={
            "type": "http",
            "method": "GET",
            "path": "/api/v1/loyers/insee/69123",
            "query_string": b"",
            "headers": [],
            "scheme": "http",
            "server": ("testserver", 80),
            "root_path": "",
        }
    )


def test_exception_taxonomy():
    assert issubclass(TransportFailure, DownloadFailed)
    assert issubclass(UpstreamStatusFailure, DownloadFailed)
    assert EmptyDataset is NoResourceFound
    assert UpstreamStatusFailure("u", 500).status_code == 502
    assert MissingColumnsError({"b", "a"}).missing == ["a", "b"]


@pytest.mark.asyncio
async def test_application_exception_handler():
    response = await carte_loyers_exception_handler(make_request(), TransportFailure("u", "timeout"))

    assert response.status_code == 503
    body = json.loads(response.body.decode())
    assert body["error_code"] == "TRANSPORT_FAILURE"
    assert body["path"] == "/api/v1/loyers/insee/69123"


@pytest.mark.asyncio
async def test_validation_exception_handler():
    exception = RequestValidationError([{"loc": ["query", "nom"], "msg": "Field required", "type": "missing"}])

    response = await validation_exception_handler(make_request(), exception)

    assert response.status_code == 422
    body = json.loads(response.body.decode())
    assert body["errors"] == [{"field": "query.nom", "message": "Field required", "type": "missing"}]


@pytest.mark.asyncio
async def test_general_exception_handler():
    response = await general_exception_handler(make_request(), Exception("Erreur interne"))

    assert response.status_code == 500
    assert json.loads(response.body.decode())["type"] == "internal_error"
