from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request, Response, status
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import BaseModel

from nftcdn.internal.config import GatewaySettings
from nftcdn.internal.logging import get_logger
from nftcdn.kernel.artifacts import ArtifactKind, ResourceKey
from nftcdn.kernel.errors import ErrorKind, GatewayError, InvalidKey
from nftcdn.runtime.services import GatewayServices, build_services

logger = get_logger(__name__)


# ---------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------

class OwnerResponse(BaseModel):
    owner: str


class NameResponse(BaseModel):
    name: str


class ErrorResponse(BaseModel):
    error: str


# ---------------------------------------------------------------------
# Error mapping (kind is logged, never exposed)
# ---------------------------------------------------------------------

def _error_response(what: str, exc: Exception) -> JSONResponse:
    if isinstance(exc, GatewayError):
        logger.warning(f"Unable to retrieve {what}", error_kind=exc.kind.value, error=str(exc))
        status_code = status.HTTP_400_BAD_REQUEST if exc.kind is ErrorKind.INVALID_KEY else status.HTTP_500_INTERNAL_SERVER_ERROR
    else:
        logger.exception(f"Unexpected failure retrieving {what}", exc_info=exc)
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=f"Unable to retrieve {what}").model_dump(),
    )


def _parse_chain(chain_id: str) -> int:
    try:
        value = int(chain_id)
    except ValueError as exc:
        raise InvalidKey(f"Invalid chain id: {chain_id!r}") from exc
    if value < 0:
        raise InvalidKey(f"Invalid chain id: {chain_id!r}")
    return value


# ---------------------------------------------------------------------
# App
# ---------------------------------------------------------------------

def create_app(services: GatewayServices) -> FastAPI:
    """
    Build the HTTP front end around already-assembled kernel services.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        await services.aclose()

    app = FastAPI(title="nftcdn", lifespan=lifespan)
    app.state.services = services

    @app.middleware("http")
    async def allow_any_origin(request: Request, call_next):
        response = await call_next(request)
        response.headers["Access-Control-Allow-Origin"] = "*"
        return response

    @app.get("/health")
    async def health():
        return {"status": "OK"}

    @app.get("/")
    async def root():
        return {"message": "Server is running"}

    @app.get("/owner/{chain_id}/{collection}/{token_id}", response_model=OwnerResponse)
    async def owner_endpoint(chain_id: str, collection: str, token_id: str):
        try:
            key = ResourceKey.parse(chain_id, collection, token_id)
            owner = await services.engine.owner_of(key)
        except Exception as exc:
            return _error_response("owner", exc)
        return OwnerResponse(owner=owner)

    @app.get("/metadata/{chain_id}/{collection}/{token_id}")
    async def metadata_endpoint(chain_id: str, collection: str, token_id: str):
        try:
            key = ResourceKey.parse(chain_id, collection, token_id)
            data = await services.engine.get_artifact(ArtifactKind.METADATA, key)
        except Exception as exc:
            return _error_response("metadata", exc)
        return Response(content=data, media_type=ArtifactKind.METADATA.content_type)

    @app.get("/image/{chain_id}/{collection}/{token_id}")
    async def image_endpoint(chain_id: str, collection: str, token_id: str):
        try:
            key = ResourceKey.parse(chain_id, collection, token_id)
            data = await services.engine.get_artifact(ArtifactKind.IMAGE, key)
        except Exception as exc:
            return _error_response("image", exc)
        return Response(content=data, media_type=ArtifactKind.IMAGE.content_type)

    @app.get("/name/{chain_id}/{collection}/", response_model=NameResponse)
    async def name_endpoint(chain_id: str, collection: str):
        try:
            collection_name = await services.names.get_name(_parse_chain(chain_id), collection)
        except Exception as exc:
            return _error_response("collection name", exc)
        return NameResponse(name=collection_name)

    @app.get("/signature/validate")
    async def signature_validate():
        return PlainTextResponse("Not implemented", status_code=status.HTTP_501_NOT_IMPLEMENTED)

    return app


# ---------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------

def run_server(settings: GatewaySettings) -> None:
    app = create_app(build_services(settings))
    logger.info("Starting nftcdn gateway", host=settings.host, port=settings.port)
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        workers=1,
        reload=False,
    )

