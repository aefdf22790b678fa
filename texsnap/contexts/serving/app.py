"""
HTTP application.

Routes:
    POST   /api/compile          render a snippet -> {success, image} | {success, error}
    GET    /api/templates        list stored templates
    POST   /api/templates        add a template {name, latex}
    DELETE /api/templates/{id}   delete a template

The compile route is a plain (sync) function, so FastAPI runs it in its
threadpool: a slow latex run blocks only its own request.
"""

from contextlib import asynccontextmanager
from typing import List

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from texsnap.config import RenderSettings, load_settings
from texsnap.contexts.rendering.compiler import CommandRunner, compile_snippet, run_command
from texsnap.contexts.rendering.exceptions import RenderError
from texsnap.contexts.rendering.workspace import WorkspaceManager, prepare_scratch_dir
from texsnap.contexts.serving.logger import _log_error, _log_info, setup_serving_logger
from texsnap.contexts.serving.models import (
    CompilePayload,
    CompileResponse,
    TemplateListResponse,
    TemplateOut,
    TemplatePayload,
)
from texsnap.contexts.templating.exceptions import TemplateNotFoundError, TemplateStoreError
from texsnap.contexts.templating.registry import BuiltinTemplateRegistry
from texsnap.contexts.templating.template_store import StoredTemplate, TemplateStore
from texsnap.utils.timestamp import now


def _template_out(templates: List[StoredTemplate]) -> List[TemplateOut]:
    return [TemplateOut(**template.to_dict()) for template in templates]


def _failure(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=CompileResponse(success=False, error=message).model_dump(exclude_none=True),
    )


def _validation_message(error: RequestValidationError) -> str:
    # e.g. "latex: Field required"
    parts = []
    for item in error.errors():
        location = ".".join(str(part) for part in item.get("loc", ()) if part != "body")
        parts.append(f"{location or 'body'}: {item.get('msg', 'invalid')}")
    return "; ".join(parts) or "Invalid request"


def create_app(
    settings: RenderSettings = None,
    runner: CommandRunner = run_command,
    configure_logging: bool = True,
    log_level: str = "INFO",
) -> FastAPI:
    """
    Build the FastAPI application.

    Startup (lifespan) empties the scratch directory exactly once, then sets up
    the workspace manager and the template store.

    Args:
        settings: Settings (defaults to load_settings())
        runner: Command runner used by the compile pipeline
        configure_logging: Install file + console log handlers on startup
        log_level: Console log level when configure_logging is set
    """
    settings = settings or load_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if configure_logging:
            setup_serving_logger(settings.logs_path / f"serve_{now()}", settings, console_level=log_level)

        scratch_dir = prepare_scratch_dir(settings.scratch_path)
        app.state.workspaces = WorkspaceManager(scratch_dir)
        app.state.registry = BuiltinTemplateRegistry(settings)
        app.state.templates = TemplateStore(settings.templates_path)
        app.state.templates.ensure_exists()
        _log_info("Server ready")
        yield

    app = FastAPI(title="texsnap", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, error: RequestValidationError):
        message = _validation_message(error)
        _log_error(f"Rejected {request.method} {request.url.path}: {message}")
        return _failure(422, message)

    @app.post("/api/compile", response_model=CompileResponse, response_model_exclude_none=True)
    def compile_route(payload: CompilePayload, request: Request):
        state = request.app.state

        custom_template = None
        if payload.templateId:
            try:
                custom_template = state.templates.get_template(payload.templateId).source
            except TemplateNotFoundError as e:
                _log_error(str(e))
                return _failure(404, str(e))
            except TemplateStoreError as e:
                _log_error(str(e))
                return _failure(500, str(e))

        compile_request = payload.to_request(settings.default_resolution, custom_template)
        try:
            artifact = compile_snippet(
                compile_request,
                manager=state.workspaces,
                settings=settings,
                runner=runner,
                registry=state.registry,
            )
        except RenderError as e:
            _log_error(f"Compile failed at {e.stage} stage (workspace {e.workspace_id})")
            return _failure(500, e.diagnostic)

        return CompileResponse(success=True, image=artifact.to_data_uri())

    @app.get("/api/templates", response_model=List[TemplateOut])
    def list_templates_route(request: Request):
        try:
            return _template_out(request.app.state.templates.list_templates())
        except TemplateStoreError as e:
            _log_error(str(e))
            return JSONResponse(status_code=500, content={"error": str(e)})

    @app.post("/api/templates", response_model=TemplateListResponse)
    def add_template_route(payload: TemplatePayload, request: Request):
        store = request.app.state.templates
        try:
            store.add_template(payload.name, payload.latex)
            return TemplateListResponse(templates=_template_out(store.list_templates()))
        except TemplateStoreError as e:
            _log_error(str(e))
            return JSONResponse(status_code=500, content={"error": str(e)})

    @app.delete("/api/templates/{template_id}", response_model=TemplateListResponse)
    def delete_template_route(template_id: str, request: Request):
        try:
            remaining = request.app.state.templates.delete_template(template_id)
            return TemplateListResponse(templates=_template_out(remaining))
        except TemplateStoreError as e:
            _log_error(str(e))
            return JSONResponse(status_code=500, content={"error": str(e)})

    return app
