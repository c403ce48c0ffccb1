from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from schemas import Task, User

# This file holds the in-memory record store. It is serialized as a whole
# to a single JSON file by persistence.py, and shared between requests
# through the lock in guard.py.


class Database(BaseModel):
    """All tasks and users, keyed by their ids.

    Every key equals the `id` of the record stored under it; the upsert
    methods key records by `record.id`, so this holds by construction.
    """

    # A dictionary of tasks. The keys are task ids.
    tasks: Dict[int, Task] = Field(default_factory=dict)

    # A dictionary of users. The keys are user ids.
    users: Dict[int, User] = Field(default_factory=dict)

    # --- Tasks ---

    def insert_task(self, task: Task) -> None:
        # Upsert: an existing task with the same id is overwritten
        self.tasks[task.id] = task

    def update_task(self, task: Task) -> None:
        # Same effect as insert_task, kept separate for caller intent
        self.tasks[task.id] = task

    def get_task(self, task_id: int) -> Optional[Task]:
        return self.tasks.get(task_id)

    def list_tasks(self) -> List[Task]:
        # Iteration order of the mapping; callers must not rely on it
        return list(self.tasks.values())

    def delete_task(self, task_id: int) -> Optional[Task]:
        # Deleting an absent id is a no-op and returns None
        return self.tasks.pop(task_id, None)

    def task_count(self) -> int:
        return len(self.tasks)

    # --- Users ---

    def insert_user(self, user: User) -> None:
        self.users[user.id] = user

    def find_user_by_username(self, username: str) -> Optional[User]:
        # Usernames are not unique; the first match in iteration order wins
        return next((u for u in self.users.values() if u.username == username), None)

    def user_count(self) -> int:
        return len(self.users)
