from models.user import User
from models.todo import Todo
