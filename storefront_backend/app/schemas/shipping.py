"""
Shipping quote schemas

Response field names are camelCase on the wire (deliveryTime, allOptions)
to match what the storefront already consumes.
"""
from typing import List, Optional, Union
from pydantic import BaseModel, Field, field_validator

from app.core.exceptions import ShippingError
from app.modules.shipping.carriers.base import NormalizedOption, QuoteResult
from app.services.cep_lookup import CepAddress


class ShippingQuoteRequest(BaseModel):
    cep: str = ""
    product_id: Optional[str] = None

    @field_validator("cep", "product_id", mode="before")
    @classmethod
    def coerce_to_str(cls, v):
        # Forms sometimes post CEPs and ids as numbers
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v


class ShippingOptionResponse(BaseModel):
    id: Union[int, str]
    name: str
    company: str
    price: float
    delivery_time: int = Field(..., alias="deliveryTime")

    class Config:
        populate_by_name = True

    @classmethod
    def from_option(cls, option: NormalizedOption) -> "ShippingOptionResponse":
        return cls(
            id=option.id,
            name=option.name,
            company=option.company,
            price=option.price,
            delivery_time=option.delivery_time,
        )


class ShippingQuoteResponse(BaseModel):
    cheapest: ShippingOptionResponse
    fastest: Optional[ShippingOptionResponse] = None
    all_options: List[ShippingOptionResponse] = Field(default_factory=list, alias="allOptions")

    class Config:
        populate_by_name = True

    @classmethod
    def from_result(cls, result: QuoteResult) -> "ShippingQuoteResponse":
        return cls(
            cheapest=ShippingOptionResponse.from_option(result.cheapest),
            fastest=ShippingOptionResponse.from_option(result.fastest) if result.fastest else None,
            all_options=[ShippingOptionResponse.from_option(o) for o in result.all_options],
        )


class ShippingErrorResponse(BaseModel):
    error: str
    message: str

    @classmethod
    def from_error(cls, err: ShippingError) -> "ShippingErrorResponse":
        return cls(error=err.error, message=err.message)


class CepAddressResponse(BaseModel):
    cep: str
    street: Optional[str] = None
    neighborhood: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    state_name: Optional[str] = None

    @classmethod
    def from_address(cls, address: CepAddress) -> "CepAddressResponse":
        return cls(
            cep=address.cep,
            street=address.street,
            neighborhood=address.neighborhood,
            city=address.city,
            state=address.state,
            state_name=address.state_name,
        )
