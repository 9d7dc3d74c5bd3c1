"""FastAPI application exposing repository and module lookups."""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Callable, Dict, List, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..errors import NotInitializedError, PathFormatError, UnknownRepositoryError
from ..orchestrator import Orchestrator


class PathRequest(BaseModel):
    path: str
    tool: Optional[str] = None


class RescanRequest(BaseModel):
    repo: Optional[str] = None


class ValidateResponse(BaseModel):
    isValid: bool
    errorMessage: Optional[str] = None


class ResolveResponse(BaseModel):
    path: str
    resolved: str


class RepositoryResponse(BaseModel):
    id: str
    path: str
    displayName: str


class RepositoriesResponse(BaseModel):
    defaultRepository: Optional[str]
    repositories: List[RepositoryResponse]


class ModuleResponse(BaseModel):
    id: str
    name: str
    path: str
    type: str
    language: str
    repoId: Optional[str] = None


class HealthResponse(BaseModel):
    status: str
    modules: int


def _default_orchestrator() -> Orchestrator:
    return Orchestrator()


def create_app(
    orchestrator_factory: Callable[[], Orchestrator] = _default_orchestrator,
) -> FastAPI:
    """Create the FastAPI application; registries are filled before serving."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        orchestrator = orchestrator_factory()
        if not orchestrator.ready:
            loop = asyncio.get_running_loop()
            await loop.run_in_executor(None, orchestrator.initialize)
        app.state.orchestrator = orchestrator
        yield

    app = FastAPI(title="repocontext", version="1.0.0", lifespan=lifespan)

    def get_orchestrator(request: Request) -> Orchestrator:
        orchestrator = getattr(request.app.state, "orchestrator", None)
        if orchestrator is None:
            raise NotInitializedError("Service is still initializing")
        return orchestrator

    @app.get("/health", response_model=HealthResponse)
    async def health(request: Request) -> HealthResponse:
        orchestrator = get_orchestrator(request)
        return HealthResponse(status="ok", modules=len(orchestrator.modules))

    @app.get("/repositories", response_model=RepositoriesResponse)
    async def repositories(request: Request) -> RepositoriesResponse:
        orchestrator = get_orchestrator(request)
        return RepositoriesResponse(
            defaultRepository=orchestrator.repositories.default_id,
            repositories=[
                RepositoryResponse(**repo.to_dict()) for repo in orchestrator.repositories.all()
            ],
        )

    @app.get("/modules", response_model=Dict[str, List[ModuleResponse]])
    async def modules(request: Request, repo: Optional[str] = None) -> Dict[str, Any]:
        orchestrator = get_orchestrator(request)
        if repo is not None:
            orchestrator.repositories.require(repo)
            return {repo: [m.to_dict() for m in orchestrator.modules.get_by_repo(repo)]}
        return orchestrator.summary()["modules"]

    @app.get("/modules/find", response_model=ModuleResponse)
    async def find_module(request: Request, name: str) -> Any:
        orchestrator = get_orchestrator(request)
        module = orchestrator.find_module(name)
        if module is None:
            return JSONResponse(status_code=404, content={"detail": f'No module matches "{name}"'})
        return module.to_dict()

    @app.post("/validate", response_model=ValidateResponse)
    async def validate(payload: PathRequest, request: Request) -> ValidateResponse:
        orchestrator = get_orchestrator(request)
        result = orchestrator.validate(payload.path, tool=payload.tool)
        return ValidateResponse(**result.to_dict())

    @app.post("/resolve", response_model=ResolveResponse)
    async def resolve(payload: PathRequest, request: Request) -> Any:
        orchestrator = get_orchestrator(request)
        result = orchestrator.validate(payload.path, tool=payload.tool)
        if not result.is_valid:
            return JSONResponse(status_code=400, content=result.to_dict())
        resolved = orchestrator.resolve(payload.path)
        return ResolveResponse(path=payload.path, resolved=str(resolved))

    @app.post("/rescan", response_model=List[ModuleResponse])
    async def rescan(payload: RescanRequest, request: Request) -> List[Dict[str, Any]]:
        orchestrator = get_orchestrator(request)
        loop = asyncio.get_running_loop()
        modules = await loop.run_in_executor(None, orchestrator.rescan, payload.repo)
        return [module.to_dict() for module in modules]

    @app.exception_handler(UnknownRepositoryError)
    async def unknown_repository_handler(
        _: Any, exc: UnknownRepositoryError
    ) -> JSONResponse:  # pragma: no cover - simple mapping
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(PathFormatError)
    async def path_format_handler(
        _: Any, exc: PathFormatError
    ) -> JSONResponse:  # pragma: no cover - simple mapping
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(NotInitializedError)
    async def not_initialized_handler(
        _: Any, exc: NotInitializedError
    ) -> JSONResponse:  # pragma: no cover - simple mapping
        return JSONResponse(status_code=503, content={"detail": str(exc)})

    return app
