from flask import Blueprint, request, jsonify, g, current_app

from models.schemas.todo import TodoCreateSchema, TodoOutSchema
from utils.decorators import jwt_required

bp = Blueprint("todos", __name__)

todo_create_schema = TodoCreateSchema()
todo_out_schema = TodoOutSchema()
todo_list_out_schema = TodoOutSchema(many=True)


@bp.get("/todos")
@jwt_required()
def list_todos():
    """
    List the bearer's todos
    ---
    tags:
      - Todos
    security:
      - Bearer: []
    responses:
      200: { description: OK }
      403: { description: Invalid token }
    """
    rows = current_app.extensions["todo_store"].find_by_owner(g.current_user.id)
    return jsonify({"data": todo_list_out_schema.dump(rows)}), 200


@bp.post("/todos")
@jwt_required()
def create_todo():
    """
    Create a todo owned by the bearer
    ---
    tags:
      - Todos
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        schema:
          type: object
          required: [title]
          properties:
            title: { type: string }
    responses:
      201: { description: Created }
      422: { description: Validation error }
    """
    data = todo_create_schema.load(request.get_json(silent=True) or {})
    todo = current_app.extensions["todo_store"].create(g.current_user.id, data["title"])
    return jsonify({"data": todo_out_schema.dump(todo)}), 201
