"""Shared models and transports for client tests."""

from typing import Callable, Optional

import httpx
from pydantic import BaseModel, ConfigDict, Field

BASE_ADDRESS = "http://api.test"


class Pet(BaseModel):
    """Plain response entity."""

    id: int
    name: str
    status: Optional[str] = None


class PagedPet(BaseModel):
    """Entity reporting the total result count, as paged APIs return it."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    name: str
    total_count: Optional[int] = Field(default=None, alias="totalCount")


class PetPage(BaseModel):
    """Single paginable object wrapping a page of pets."""

    model_config = ConfigDict(populate_by_name=True)

    items: list[Pet] = Field(default_factory=list)
    total_count: Optional[int] = Field(default=None, alias="totalCount")


class RecordingTransport(httpx.MockTransport):
    """Mock transport that keeps every request it served."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]):
        self.requests: list[httpx.Request] = []

        def recording_handler(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(recording_handler)

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]
