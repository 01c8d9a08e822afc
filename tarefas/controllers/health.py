"""Health check endpoint for monitoring and load balancers."""

from flask import jsonify
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from tarefas import app, db, limiter
from tarefas.utils.datetime_utils import now_utc, to_iso


@app.route("/health")
@limiter.exempt  # Don't rate limit health checks
def health_check():
    """Health check endpoint for monitoring and load balancers.

    Returns:
        JSON response with health status
        - 200: Healthy
        - 503: Unhealthy (database connection failed)
    """
    health_status = {
        "status": "healthy",
        "timestamp": to_iso(now_utc()),
        "checks": {}
    }

    try:
        db.session.execute(text("SELECT 1"))
        db.session.commit()
        health_status["checks"]["database"] = {
            "status": "ok",
            "message": "Database connection successful"
        }
    except SQLAlchemyError as e:
        db.session.rollback()
        app.logger.error("Health check failed: %s", e)
        health_status["status"] = "unhealthy"
        health_status["checks"]["database"] = {
            "status": "error",
            "message": f"Database connection failed: {str(e)}"
        }
        return jsonify(health_status), 503

    return jsonify(health_status), 200
