"""
Authentication blueprint:
- POST /auth/register
- POST /auth/login
- POST /auth/logout
- GET  /auth/me

The routes only decode and validate payloads and shape responses; all
credential and token logic lives in services.auth_service.AuthService,
reached through current_app.extensions["auth_service"].
"""
from __future__ import annotations

from flask import Blueprint, request, jsonify, g

from models.schemas.user import (
    UserCreateSchema,
    UserLoginSchema,
    UserOutSchema,
    UserSummarySchema,
)
from utils.decorators import bearer_token, get_auth_service, jwt_required

bp = Blueprint("auth", __name__)

user_create_schema = UserCreateSchema()
user_login_schema = UserLoginSchema()
user_out_schema = UserOutSchema()
user_summary_schema = UserSummarySchema()


@bp.post("/register")
def register():
    """
    register a new user.
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
          required: [email, password]
          properties:
            email: { type: string }
            password: { type: string }
            name: { type: string }
    responses:
      201:
        description: Created
      400:
        description: Email already registered
      422:
        description: Validation error
    """
    payload = request.get_json(silent=True) or {}
    data = user_create_schema.load(payload)

    user = get_auth_service().register(data["email"], data["password"], data.get("name"))

    return jsonify(
        {
            "message": "User successfully registered",
            "user": user_summary_schema.dump(user),
        }
    ), 201


@bp.post("/login")
def login():
    """
    Login: return the user and a session token
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           required: [email, password]
           properties:
             email: { type: string }
             password: { type: string }
    responses:
      200:
        description: OK (returns user and token)
      401:
        description: Invalid email or password
    """
    payload = request.get_json(silent=True) or {}
    data = user_login_schema.load(payload)

    user, token = get_auth_service().login(data["email"], data["password"])

    return jsonify(
        {
            "user": user_out_schema.dump(user),
            "token": token,
        }
    ), 200


@bp.post("/logout")
def logout():
    """
    logout: revokes the presented session token
    ---
    tags:
      - Auth
    security:
      - Bearer: []
    responses:
      200:
        description: Token revoked
      400:
        description: No token provided
    """
    get_auth_service().logout(bearer_token())
    return jsonify(
        {
            "message": "Successfully logged out. Token has been revoked.",
        }
    ), 200


@bp.get("/me")
@jwt_required()
def me():
    """
    Current user for a valid session token.
    ---
    tags:
      - Auth
    security:
      - Bearer: []
    responses:
      200:
        description: OK
      401:
        description: Invalid, expired or revoked token
    """
    user = get_auth_service().current_user(g.current_claims)
    return jsonify({"user": user_out_schema.dump(user)}), 200
