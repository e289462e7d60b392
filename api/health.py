from flask import Blueprint, current_app

bp = Blueprint("health", __name__)


@bp.get("/health")
def health():
    """
    Health check
    ---
    tags:
      - Health
    responses:
      200:
        description: API is up
        schema:
          type: object
          properties:
            status:
              type: string
              example: ok
            env:
              type: string
              example: dev
            version:
              type: string
              example: 1.0.0
    """
    return {"status": "ok", "env": current_app.config.get("APP_ENV"), "version": "1.0.0"}, 200
