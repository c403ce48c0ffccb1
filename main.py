import logging
from contextlib import asynccontextmanager
from typing import Annotated, List, Optional

import uvicorn
from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request, Response, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

# Import the Pydantic schemas, the shared database and our settings
from config import Settings, get_settings
from guard import SharedDatabase
from logging_setup import setup_logging
from persistence import PersistenceError
from schemas import Task, User, UserLogin

logger = logging.getLogger(__name__)

LOGIN_OK = "Logged in!"
LOGIN_FAILED = "Invalid Username or password"


# Dependency function to get the process-wide database from the app state
def get_database(request: Request) -> SharedDatabase:
    return request.app.state.database


DatabaseDep = Annotated[SharedDatabase, Depends(get_database)]

router = APIRouter()


# Helper that answers 200 with an empty body after a mutation
def ok() -> Response:
    return Response(status_code=status.HTTP_200_OK)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()

    # Load the database file on startup; a missing or broken file means an empty store
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.database = SharedDatabase.open(settings.DATABASE_PATH)
        yield
        logger.info("Task list service shutting down")

    # Initialize FastAPI
    app = FastAPI(title="Task list", lifespan=lifespan)

    # Configure CORS so local frontends (and file:// pages, which send Origin: null) can call the API
    app.add_middleware(
        CORSMiddleware,
        allow_origin_regex=settings.CORS_ORIGIN_REGEX,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Authorization", "Accept", "Content-Type"],
        max_age=settings.CORS_MAX_AGE,
    )

    app.include_router(router)
    return app


# --- API Endpoints ---
# Endpoints are plain `def` functions, so FastAPI runs each request in a
# worker thread; SharedDatabase serializes their access to the store.


# Health endpoint with the current record counts
@router.get("/health")
def health(db: DatabaseDep):
    with db.reading() as store:
        return {"status": "ok", "tasks": store.task_count(), "users": store.user_count()}


# --- Task Endpoints ---
# Endpoint to create a task. An existing task with the same id is overwritten.
@router.post("/task")
def create_task(task: Task, db: DatabaseDep):
    try:
        with db.mutating() as store:
            store.insert_task(task)
    except PersistenceError:
        # The in-memory insert stands; the failed save is only logged
        logger.exception("Failed to persist task id=%s", task.id)
    return ok()


# Endpoint to list every task. The order is not guaranteed.
@router.get("/task", response_model=List[Task])
def read_tasks(db: DatabaseDep):
    with db.reading() as store:
        return store.list_tasks()


# Endpoint to update a task. Same effect as create: upsert by id.
@router.put("/task")
def update_task(task: Task, db: DatabaseDep):
    try:
        with db.mutating() as store:
            store.update_task(task)
    except PersistenceError:
        logger.exception("Failed to persist task id=%s", task.id)
    return ok()


# Endpoint to get a single task by id
@router.get("/task/{task_id}", response_model=Task)
def read_task(task_id: int, db: DatabaseDep):
    with db.reading() as store:
        task = store.get_task(task_id)
    if task is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Task not found")
    return task


# Endpoint to delete a task. Deleting an unknown id still answers 200.
@router.delete("/task/{task_id}")
def delete_task(task_id: int, db: DatabaseDep):
    try:
        with db.mutating() as store:
            removed = store.delete_task(task_id)
        if removed is None:
            logger.debug("Delete of unknown task id=%s ignored", task_id)
    except PersistenceError:
        logger.exception("Failed to persist deletion of task id=%s", task_id)
    return ok()


# --- User Endpoints ---
# Endpoint for user registration. The password is stored as given.
@router.post("/register")
def register_user(user: User, db: DatabaseDep):
    try:
        with db.mutating() as store:
            store.insert_user(user)
    except PersistenceError:
        logger.exception("Failed to persist user id=%s", user.id)
    return ok()


# Endpoint for user login. Unknown usernames and wrong passwords get the same answer.
@router.post("/login")
def login(credentials: UserLogin, db: DatabaseDep):
    with db.reading() as store:
        user = store.find_user_by_username(credentials.username)
    if user is None or user.password != credentials.password:
        return PlainTextResponse(LOGIN_FAILED, status_code=status.HTTP_400_BAD_REQUEST)
    return PlainTextResponse(LOGIN_OK)


app = create_app()


if __name__ == "__main__":
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL)
    # Binding the port is the only failure that stops the service
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)
