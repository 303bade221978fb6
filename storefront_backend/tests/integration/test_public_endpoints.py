import httpx
import pytest
from httpx import ASGITransport, AsyncClient
from unittest.mock import AsyncMock, MagicMock

from app.api.deps import get_cep_lookup_service, get_shipping_quote_service
from app.main import app
from app.services.cep_lookup import CepLookupService
from app.services.shipping_service import ShippingQuoteService


OPTIONS = [
    {"id": 1, "name": "PAC", "price": "32.50", "delivery_time": 9, "company": {"name": "Correios"}},
    {"id": 2, "name": "SEDEX", "price": "55.00", "delivery_time": 3, "company": {"name": "Correios"}},
]


@pytest.fixture
def client_for():
    """ASGI client with the shipping services overridden."""
    def _make(quote_service=None, cep_service=None):
        if quote_service is not None:
            app.dependency_overrides[get_shipping_quote_service] = lambda: quote_service
        if cep_service is not None:
            app.dependency_overrides[get_cep_lookup_service] = lambda: cep_service
        return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")

    yield _make
    app.dependency_overrides.clear()


@pytest.fixture
def quote_service(shipping_config, sample_item, make_dimension_store, make_carrier):
    def _make(handler):
        carrier = make_carrier(handler)
        service = ShippingQuoteService(shipping_config, make_dimension_store(sample_item), carrier=carrier)
        return service, carrier
    return _make


@pytest.mark.asyncio
async def test_root_endpoint_basic_response(client_for):
    async with client_for() as client:
        resp = await client.get("/")
    assert resp.status_code == 200
    body = resp.json()
    assert body.get("message") == "Storefront API"
    assert body.get("status") == "operational"


@pytest.mark.asyncio
async def test_health_reports_carrier_configuration(client_for, monkeypatch):
    import app.core.database as database_module

    session = AsyncMock()
    session_cm = MagicMock()
    session_cm.__aenter__ = AsyncMock(return_value=session)
    session_cm.__aexit__ = AsyncMock(return_value=False)
    monkeypatch.setattr(database_module, "AsyncSessionLocal", MagicMock(return_value=session_cm))

    async with client_for() as client:
        resp = await client.get("/health")

    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "healthy"
    assert body["database"] == "connected"
    assert body["shipping_carrier_configured"] is False


@pytest.mark.asyncio
async def test_health_database_down(client_for, monkeypatch):
    import app.core.database as database_module

    monkeypatch.setattr(database_module, "AsyncSessionLocal", MagicMock(side_effect=OSError("refused")))

    async with client_for() as client:
        resp = await client.get("/health")

    assert resp.status_code == 503
    assert resp.json()["status"] == "unhealthy"


@pytest.mark.asyncio
async def test_calculate_success(client_for, quote_service):
    service, carrier = quote_service(lambda r: httpx.Response(200, json={"data": OPTIONS}))

    async with client_for(quote_service=service) as client:
        resp = await client.post("/api/shipping/calculate", json={"cep": "89010-100", "product_id": "prod-1"})

    assert resp.status_code == 200
    body = resp.json()
    assert body["cheapest"] == {"id": 1, "name": "PAC", "company": "Correios", "price": 32.5, "deliveryTime": 9}
    assert body["fastest"]["id"] == 2
    assert body["fastest"]["deliveryTime"] == 3
    assert [o["id"] for o in body["allOptions"]] == [1, 2]
    assert len(carrier.requests) == 1


@pytest.mark.asyncio
async def test_calculate_single_option_has_null_fastest(client_for, quote_service):
    service, _ = quote_service(lambda r: httpx.Response(200, json=OPTIONS[:1]))

    async with client_for(quote_service=service) as client:
        resp = await client.post("/api/shipping/calculate", json={"cep": "89010100", "product_id": "prod-1"})

    body = resp.json()
    assert body["fastest"] is None
    assert len(body["allOptions"]) == 1


@pytest.mark.asyncio
async def test_calculate_invalid_cep_is_200_error(client_for, quote_service):
    service, carrier = quote_service(lambda r: httpx.Response(200, json=OPTIONS))

    async with client_for(quote_service=service) as client:
        resp = await client.post("/api/shipping/calculate", json={"cep": "123", "product_id": "prod-1"})

    assert resp.status_code == 200
    assert resp.json() == {"error": "CEP inválido", "message": "Por favor, verifique o CEP digitado."}
    assert carrier.requests == []


@pytest.mark.asyncio
async def test_calculate_carrier_rejection_is_200_error(client_for, quote_service):
    service, _ = quote_service(lambda r: httpx.Response(422, json={"errors": {"to.postal_code": ["invalid"]}}))

    async with client_for(quote_service=service) as client:
        resp = await client.post("/api/shipping/calculate", json={"cep": "89010100", "product_id": "prod-1"})

    assert resp.status_code == 200
    assert resp.json()["error"] == "CEP inválido ou fora da área de cobertura"


@pytest.mark.asyncio
async def test_calculate_numeric_cep_accepted(client_for, quote_service):
    service, carrier = quote_service(lambda r: httpx.Response(200, json=OPTIONS))

    async with client_for(quote_service=service) as client:
        resp = await client.post("/api/shipping/calculate", json={"cep": 89010100, "product_id": "prod-1"})

    assert "cheapest" in resp.json()
    assert len(carrier.requests) == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("content", ["not json", '{"cep": ["89010100"]}', "[]"])
async def test_calculate_malformed_body_is_200_error(client_for, quote_service, content):
    service, carrier = quote_service(lambda r: httpx.Response(200, json=OPTIONS))

    async with client_for(quote_service=service) as client:
        resp = await client.post(
            "/api/shipping/calculate",
            content=content,
            headers={"Content-Type": "application/json"},
        )

    assert resp.status_code == 200
    assert resp.json()["error"] == "Erro ao processar solicitação"
    assert carrier.requests == []


@pytest.mark.asyncio
async def test_cep_lookup_found(client_for):
    cep_service = CepLookupService(
        base_url="https://brasilapi.test",
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(
            lambda r: httpx.Response(200, json={
                "cep": "01310100",
                "state": "SP",
                "city": "São Paulo",
                "neighborhood": "Bela Vista",
                "street": "Avenida Paulista",
            })
        )),
    )

    async with client_for(cep_service=cep_service) as client:
        resp = await client.get("/api/shipping/cep/01310-100")

    assert resp.status_code == 200
    body = resp.json()
    assert body["city"] == "São Paulo"
    assert body["state_name"] == "São Paulo"


@pytest.mark.asyncio
async def test_cep_lookup_not_found(client_for):
    cep_service = CepLookupService(
        base_url="https://brasilapi.test",
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(404))),
    )

    async with client_for(cep_service=cep_service) as client:
        resp = await client.get("/api/shipping/cep/99999999")

    assert resp.status_code == 404
    assert resp.json()["detail"] == "CEP não encontrado"


@pytest.mark.asyncio
@pytest.mark.parametrize("option_id", [1.5, {"x": 1}, [1], True])
async def test_calculate_unusable_option_id_is_200_error(client_for, quote_service, option_id):
    raw = [{"id": option_id, "name": "PAC", "price": "10.00", "delivery_time": 3, "company": {"name": "Correios"}}]
    service, _ = quote_service(lambda r: httpx.Response(200, json=raw))

    async with client_for(quote_service=service) as client:
        resp = await client.post("/api/shipping/calculate", json={"cep": "89010100", "product_id": "prod-1"})

    assert resp.status_code == 200
    assert resp.json()["error"] == "Nenhuma opção de frete disponível"


@pytest.mark.asyncio
async def test_calculate_unserializable_result_is_200_error(client_for):
    from app.modules.shipping.carriers.base import NormalizedOption, QuoteResult

    option = NormalizedOption(id={"x": 1}, name="PAC", company="Correios", price=10.0, delivery_time=3)
    service = MagicMock()
    service.calculate = AsyncMock(return_value=QuoteResult(cheapest=option, all_options=[option]))

    async with client_for(quote_service=service) as client:
        resp = await client.post("/api/shipping/calculate", json={"cep": "89010100", "product_id": "prod-1"})

    assert resp.status_code == 200
    assert resp.json()["error"] == "Erro ao processar solicitação"
