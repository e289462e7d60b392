"""
Authentication blueprint:
- POST /register
- POST /login     -> access token in body, refresh token in an http-only cookie
- POST /token     -> rotate refresh token, issue a new access token
- POST /logout    -> clear the stored refresh token
- GET  /username  -> username of the bearer

Token lifecycle lives in api.sessions.TokenSessionManager; these handlers only
validate input and shape the HTTP response.
"""
from __future__ import annotations

from flask import Blueprint, request, jsonify, g, current_app, make_response

from models.schemas.user import UserCredentialsSchema, UserOutSchema
from utils.decorators import bearer_token, jwt_required

bp = Blueprint("auth", __name__)

credentials_schema = UserCredentialsSchema()
user_out_schema = UserOutSchema()


def _manager():
    return current_app.extensions["session_manager"]


def _token_response(pair, status=200):
    resp = make_response(
        jsonify(
            {
                "access_token": pair.access_token,
                "token_type": "bearer",
                "expires_in": pair.expires_in,
            }
        ),
        status,
    )
    resp.set_cookie(
        current_app.config["REFRESH_COOKIE_NAME"],
        pair.refresh_token,
        httponly=True,
        secure=current_app.config["REFRESH_COOKIE_SECURE"],
        samesite=current_app.config["REFRESH_COOKIE_SAMESITE"],
    )
    return resp


@bp.post("/register")
def register():
    """
    Register a new user.
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        schema:
          type: object
          required: [username, password]
          properties:
            username: { type: string }
            password: { type: string }
    responses:
      201:
        description: Created
      409:
        description: Username already exists
      422:
        description: Validation error
    """
    data = credentials_schema.load(request.get_json(silent=True) or {})
    user = _manager().register(data["username"], data["password"])
    return jsonify({"data": user_out_schema.dump(user)}), 201


@bp.post("/login")
def login():
    """
    Log in a user: access token in the body, refresh token as a cookie.
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        schema:
          type: object
          required: [username, password]
          properties:
            username: { type: string }
            password: { type: string }
    responses:
      200:
        description: OK (returns access token, sets refresh cookie)
      401:
        description: Invalid username or password
      404:
        description: User not found
    """
    data = credentials_schema.load(request.get_json(silent=True) or {})
    pair = _manager().authenticate(data["username"], data["password"])
    return _token_response(pair)


@bp.post("/token")
def token():
    """
    Rotate the refresh token cookie and issue a new access token.
    ---
    tags:
      - Auth
    responses:
      200:
        description: New access token provided
      401:
        description: No refresh token cookie
      403:
        description: Invalid or superseded refresh token
    """
    presented = request.cookies.get(current_app.config["REFRESH_COOKIE_NAME"])
    pair = _manager().renew(presented)
    return _token_response(pair)


@bp.post("/logout")
def logout():
    """
    Log out: clears the stored refresh token and the cookie.
    ---
    tags:
      - Auth
    security:
      - Bearer: []
    responses:
      204:
        description: Logged out
      403:
        description: Invalid or expired access token
      404:
        description: User not found
    """
    _manager().invalidate(bearer_token())
    resp = make_response("", 204)
    resp.delete_cookie(current_app.config["REFRESH_COOKIE_NAME"])
    return resp


@bp.get("/username")
@jwt_required()
def username():
    """
    Retrieve the username of the bearer.
    ---
    tags:
      - Auth
    security:
      - Bearer: []
    responses:
      200:
        description: Username retrieved successfully
      403:
        description: Invalid token
      404:
        description: User not found
    """
    return jsonify({"username": g.current_user.username}), 200
