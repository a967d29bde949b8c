"""Demo routes — the downstream application behind the CORS policy layer.

GET  /greet   — static greeting.
POST /greetme — greets the ``name`` from the JSON body.
"""

import json
from typing import Any

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from pydantic import BaseModel

router = APIRouter()


class GreetRequest(BaseModel):
    # Any JSON value; non-strings are greeted by their JSON text.
    name: Any = None


class GreetResponse(BaseModel):
    message: str


@router.get("/greet", response_model=GreetResponse)
async def greet() -> GreetResponse:
    return GreetResponse(message="Hello from the API!")


@router.post("/greetme", response_model=GreetResponse)
async def greet_me(body: GreetRequest):
    if body.name in (None, False, "", 0):
        return JSONResponse(
            {"message": "Name is required in the request body."}, status_code=400
        )
    name = body.name if isinstance(body.name, str) else json.dumps(body.name)
    return GreetResponse(message=f"Hello, {name}!")
