from pydantic import BaseModel, Field

# Schema for a single task on the list
class Task(BaseModel):
    id: int = Field(ge=0)
    name: str
    completed: bool

# Schema for a registered user. The password is kept as plain text.
class User(BaseModel):
    id: int = Field(ge=0)
    username: str
    password: str

# Schema for a login attempt. Extra fields such as `id` are ignored,
# so a full User body is accepted as well.
class UserLogin(BaseModel):
    username: str
    password: str
