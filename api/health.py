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
        description: API and store are up
        schema:
          type: object
          properties:
            status:
              type: string
              example: ok
            store:
              type: string
              example: ok
      503:
        description: Store unreachable
    """
    storage = current_app.extensions["storage"]
    if storage.ping():
        return {"status": "ok", "store": "ok", "version": "1.0.0"}, 200
    return {"status": "degraded", "store": "unavailable", "version": "1.0.0"}, 503
