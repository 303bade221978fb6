import httpx
import pytest

from app.services.cep_lookup import CepAddress, CepLookupService


BRASILAPI_BODY = {
    "cep": "89010100",
    "state": "SC",
    "city": "Blumenau",
    "neighborhood": "Centro",
    "street": "Rua XV de Novembro",
    "service": "viacep",
}


def _service(handler):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return CepLookupService(base_url="https://brasilapi.test/", http_client=client)


@pytest.mark.asyncio
async def test_fetch_address():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(str(request.url))
        return httpx.Response(200, json=BRASILAPI_BODY)

    service = _service(handler)
    address = await service.fetch_address("89010-100")
    await service.close()

    assert seen == ["https://brasilapi.test/api/cep/v1/89010100"]
    assert address == CepAddress(
        cep="89010100",
        street="Rua XV de Novembro",
        neighborhood="Centro",
        city="Blumenau",
        state="SC",
    )
    assert address.state_name == "Santa Catarina"


@pytest.mark.asyncio
async def test_invalid_cep_makes_no_request():
    call_count = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal call_count
        call_count += 1
        return httpx.Response(200, json=BRASILAPI_BODY)

    service = _service(handler)

    assert await service.fetch_address("8901") is None
    assert call_count == 0


@pytest.mark.asyncio
async def test_unknown_cep():
    service = _service(lambda r: httpx.Response(404, json={"message": "CEP não encontrado"}))
    assert await service.fetch_address("00000000") is None


@pytest.mark.asyncio
async def test_network_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    service = _service(handler)
    assert await service.fetch_address("89010100") is None


@pytest.mark.asyncio
async def test_non_json_body():
    service = _service(lambda r: httpx.Response(200, text="oops"))
    assert await service.fetch_address("89010100") is None


def test_state_name_unknown():
    assert CepAddress(cep="89010100", state="XX").state_name is None
    assert CepAddress(cep="89010100").state_name is None
