from fastapi import FastAPI
from fastapi.testclient import TestClient
from pydantic import BaseModel, Field
import pytest

from src.platform.exception.exception_handlers import register_exception_handlers
from src.platform.exception.exceptions import DomainError, TicketStoreError


pytestmark = pytest.mark.unit


class _ScanBody(BaseModel):
    code: str = Field(min_length=1)


@pytest.fixture
def client() -> TestClient:
    app = FastAPI()
    register_exception_handlers(app)

    @app.post('/domain')
    async def domain_rejection() -> None:
        raise DomainError('Ticket T-001 is used, cannot be validated')

    @app.get('/store')
    async def store_outage() -> None:
        raise TicketStoreError('Ticket Store unreachable')

    @app.get('/crash')
    async def crash() -> None:
        raise RuntimeError('boom')

    @app.post('/scan')
    async def scan(body: _ScanBody) -> dict[str, str]:
        return {'code': body.code}

    return TestClient(app, raise_server_exceptions=False)


def test_domain_error_maps_to_its_status(client):
    response = client.post('/domain')

    assert response.status_code == 400
    assert response.json() == {'detail': 'Ticket T-001 is used, cannot be validated'}


def test_ticket_store_error_is_service_unavailable(client):
    response = client.get('/store')

    assert response.status_code == 503
    assert response.json() == {'detail': 'Ticket Store unreachable'}


def test_malformed_body_is_bad_request(client):
    response = client.post('/scan', json={'code': ''})

    assert response.status_code == 400
    assert response.json()['detail'][0]['loc'] == ['body', 'code']


def test_unhandled_error_is_hidden(client):
    response = client.get('/crash')

    assert response.status_code == 500
    assert response.json() == {'detail': 'Internal server error'}
