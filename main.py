from fastapi import APIRouter, Depends, FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager
from typing import List, Optional
import json
import logging
import re
import sys

import config
from errors import NotFoundError, StorageError, ValidationError
from request_log import RequestLog
from storage import Todo, TodoStore, next_id

logging.basicConfig(
    level=config.LOG_LEVEL,
    handlers=[logging.StreamHandler(sys.stdout)],
    format="%(levelname)s: %(message)s",
)
logger = logging.getLogger(__name__)

router = APIRouter()


# ----------------- UTILS -----------------

def get_store(request: Request) -> TodoStore:
    return request.app.state.store


def parse_todo_id(todo_id: str) -> int:
    # leading integer wins: "1.5" and "5abc" are ids 1 and 5
    match = re.match(r"\s*([+-]?\d+)", todo_id, re.ASCII)
    if match is None:
        raise ValidationError("Invalid Todo ID")
    return int(match.group(1))


class TodoPathMiddleware:
    """Send any two-segment todos path to /todos/{id}, e.g. //todos/1 or /todos/1/."""

    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] == "http":
            segments = [s for s in scope["path"].split("/") if s]
            if len(segments) == 2 and segments[0] == "todos":
                scope = dict(scope, path=f"/todos/{segments[1]}")
        await self.app(scope, receive, send)


def request_line(request: Request) -> str:
    """Method plus the path and query exactly as the client sent them."""
    raw_path = request.scope.get("raw_path")
    path = raw_path.decode("latin-1") if raw_path else request.url.path
    query = request.scope.get("query_string", b"")
    if query:
        path += "?" + query.decode("latin-1")
    return f"{request.method} {path}"


async def json_body(request: Request) -> dict:
    """Request body as a dict. Empty body is {}, anything but an object has no keys."""
    raw = await request.body()
    if not raw:
        return {}
    try:
        body = json.loads(raw)
    except ValueError:
        raise ValidationError("Invalid JSON in request body")
    return body if isinstance(body, dict) else {}


def not_found(todo_id: int) -> NotFoundError:
    return NotFoundError(f"Todo with ID {todo_id} not found")


# ----------------- API ROUTES -----------------

@router.get("/todos", response_model=List[Todo])
def get_todos(completed: Optional[str] = None, store: TodoStore = Depends(get_store)):
    todos = store.load()
    if completed is not None:
        # literal compare: anything but "true" means not completed
        wanted = completed == "true"
        todos = [t for t in todos if t.completed == wanted]
    return todos


@router.get("/todos/{todo_id}", response_model=Todo)
def get_todo(todo_id: int = Depends(parse_todo_id), store: TodoStore = Depends(get_store)):
    todo = next((t for t in store.load() if t.id == todo_id), None)
    if todo is None:
        raise not_found(todo_id)
    return todo


@router.post("/todos", response_model=Todo, status_code=201)
def create_todo(body: dict = Depends(json_body), store: TodoStore = Depends(get_store)):
    title = body.get("title")
    if not isinstance(title, str) or title.strip() == "":
        raise ValidationError("Missing or invalid title field")
    completed = body.get("completed")

    todos = store.load()
    todo = Todo(
        id=next_id(todos),
        title=title.strip(),
        completed=completed if isinstance(completed, bool) else False,
    )
    todos.append(todo)
    store.save(todos)
    return todo


@router.put("/todos/{todo_id}", response_model=Todo)
def update_todo(
    todo_id: int = Depends(parse_todo_id),
    body: dict = Depends(json_body),
    store: TodoStore = Depends(get_store),
):
    if "title" not in body and "completed" not in body:
        raise ValidationError("Missing fields to update (title or completed)")

    changes = {}
    if "title" in body:
        title = body["title"]
        if not isinstance(title, str) or title.strip() == "":
            raise ValidationError("Invalid title field")
        changes["title"] = title.strip()
    if "completed" in body:
        if not isinstance(body["completed"], bool):
            raise ValidationError("Invalid completed field (must be boolean)")
        changes["completed"] = body["completed"]

    todos = store.load()
    index = next((i for i, t in enumerate(todos) if t.id == todo_id), None)
    if index is None:
        raise not_found(todo_id)

    todo = todos[index].model_copy(update=changes)
    todos[index] = todo
    store.save(todos)
    return todo


@router.delete("/todos/{todo_id}", status_code=204)
def delete_todo(todo_id: int = Depends(parse_todo_id), store: TodoStore = Depends(get_store)):
    todos = store.load()
    new_list = [t for t in todos if t.id != todo_id]

    if len(new_list) == len(todos):
        raise not_found(todo_id)

    store.save(new_list)
    return Response(status_code=204)


# ----------------- ERRORS -----------------

async def http_error(request: Request, exc: StarletteHTTPException):
    if isinstance(exc, (ValidationError, NotFoundError)):
        return JSONResponse({"message": exc.detail}, status_code=exc.status_code)
    if exc.status_code in (404, 405):
        # unknown path, or a method the path does not support
        return JSONResponse({"message": "Endpoint not found"}, status_code=404)
    return JSONResponse({"message": exc.detail}, status_code=exc.status_code)


async def storage_error(request: Request, exc: StorageError):
    logger.error("Error handling %s %s: %s", request.method, request.url.path, exc, exc_info=exc)
    return JSONResponse({"message": "Internal Server Error"}, status_code=500)


# ----------------- APP -----------------

def create_app(db_file: str = config.DB_FILE, log_file: str = config.LOG_FILE) -> FastAPI:
    request_log = RequestLog(log_file)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        request_log.open()
        logger.info("Todos stored in %s, requests logged to %s", db_file, log_file)
        yield
        request_log.close()

    app = FastAPI(
        title="Todos",
        lifespan=lifespan,
        redirect_slashes=False,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.store = TodoStore(db_file)
    app.state.request_log = request_log

    app.add_middleware(TodoPathMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_request(request: Request, call_next):
        request_log.append(request_line(request))
        return await call_next(request)

    app.add_exception_handler(StarletteHTTPException, http_error)
    app.add_exception_handler(StorageError, storage_error)
    app.include_router(router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    logger.info("Server running on http://localhost:%d", config.PORT)
    uvicorn.run(app, host=config.HOST, port=config.PORT)
