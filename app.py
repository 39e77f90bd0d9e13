import logging

from flask import Blueprint, Flask, current_app, jsonify, request
from flask_cors import CORS
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

from config import config
from models.analytics_model import get_forecasting_analytics
from models.bulk_forecast_model import generate_bulk_forecast, get_reorder_recommendations
from models.forecast_model import analyze_consumption, forecast_stock_level
from models.forecast_types import ProductNotFound, Urgency
from models.projection_model import default_rng
from utils.ai_config import (
    DEFAULT_FORECAST_DAYS, MAX_FORECAST_DAYS, DEFAULT_BULK_LIMIT, DEFAULT_RECOMMENDATION_LIMIT, MAX_BULK_LIMIT
)
from utils.date_utils import utc_now

# ✅ Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s"
)
logger = logging.getLogger("ApothecaryForecast")

forecasting = Blueprint("forecasting", __name__)

URGENCY_LEVELS = {"all"} | {u.value for u in Urgency}


class InvalidParameter(ValueError):
    pass


def _int_param(raw, name, default, upper):
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except (TypeError, ValueError):
        raise InvalidParameter(f"{name} must be an integer")
    if value < 1 or value > upper:
        raise InvalidParameter(f"{name} must be between 1 and {upper}")
    return value


def _bool_param(raw) -> bool:
    if isinstance(raw, bool):
        return raw
    return str(raw).lower() == "true"


def _error(message, status):
    return jsonify({"status": "error", "message": message}), status


def _deps():
    cfg = current_app.config
    return cfg["PRODUCT_REPO"], cfg["MOVEMENT_REPO"], cfg["CLOCK"]


@forecasting.errorhandler(ProductNotFound)
def handle_not_found(e):
    return _error(str(e), 404)


@forecasting.errorhandler(InvalidParameter)
def handle_bad_request(e):
    return _error(str(e), 400)


@forecasting.route("/product/<int:product_id>", methods=["GET"])
def product_forecast(product_id):
    """
    Query: ?days=30  (forecast horizon, 1..365)
    """
    days = _int_param(request.args.get("days"), "days", DEFAULT_FORECAST_DAYS, MAX_FORECAST_DAYS)
    product_repo, movement_repo, clock = _deps()

    seed = current_app.config["RANDOM_SEED"]
    forecast = forecast_stock_level(
        product_id, product_repo, movement_repo,
        forecast_days=days, clock=clock, rng=default_rng(seed),
    )
    return jsonify(forecast.to_dict())


@forecasting.route("/analysis/<int:product_id>", methods=["GET"])
def consumption_analysis(product_id):
    days = _int_param(request.args.get("days"), "days", DEFAULT_FORECAST_DAYS, MAX_FORECAST_DAYS)
    product_repo, movement_repo, clock = _deps()

    analysis = analyze_consumption(product_id, product_repo, movement_repo, days=days, clock=clock)
    return jsonify(analysis.to_dict())


@forecasting.route("/analytics", methods=["GET"])
def forecasting_analytics():
    product_repo, movement_repo, clock = _deps()
    return jsonify(get_forecasting_analytics(product_repo, movement_repo, clock=clock))


@forecasting.route("/recommendations", methods=["GET"])
def reorder_recommendations():
    """
    Query: ?urgencyLevel=all|high|medium|low&limit=20
    """
    urgency_level = request.args.get("urgencyLevel", "all")
    if urgency_level not in URGENCY_LEVELS:
        return _error(f"urgencyLevel must be one of {sorted(URGENCY_LEVELS)}", 400)
    limit = _int_param(request.args.get("limit"), "limit", DEFAULT_RECOMMENDATION_LIMIT, MAX_BULK_LIMIT)
    product_repo, movement_repo, clock = _deps()

    result = get_reorder_recommendations(
        product_repo, movement_repo,
        urgency_level=urgency_level,
        limit=limit,
        clock=clock,
        seed=current_app.config["RANDOM_SEED"],
        max_workers=current_app.config["MAX_WORKERS"],
    )
    return jsonify(result)


@forecasting.route("/bulk", methods=["POST"])
def bulk_forecast():
    """
    Body:
    {
      "productIds": [1, 2, 3],       # optional; all products when missing
      "forecastDays": 30,            # optional (default 30)
      "includeOnlyLowStock": false,  # optional; stock <= reorder level only
      "limit": 50                    # optional (default 50)
    }
    """
    data = request.get_json(silent=True) or {}
    product_ids = data.get("productIds")
    if product_ids is not None and not isinstance(product_ids, list):
        return _error("productIds must be a list", 400)

    forecast_days = _int_param(data.get("forecastDays"), "forecastDays", DEFAULT_FORECAST_DAYS, MAX_FORECAST_DAYS)
    limit = _int_param(data.get("limit"), "limit", DEFAULT_BULK_LIMIT, MAX_BULK_LIMIT)
    product_repo, movement_repo, clock = _deps()

    result = generate_bulk_forecast(
        product_repo, movement_repo,
        product_ids=product_ids,
        forecast_days=forecast_days,
        include_only_low_stock=_bool_param(data.get("includeOnlyLowStock", False)),
        limit=limit,
        clock=clock,
        seed=current_app.config["RANDOM_SEED"],
        max_workers=current_app.config["MAX_WORKERS"],
    )
    return jsonify(result.to_dict())


def _check_database(engine):
    # ✅ Database health check
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error(f"❌ Database connection failed: {e}")
    else:
        logger.info("✅ Database connection established successfully.")


def create_app(product_repo=None, movement_repo=None, clock=None, random_seed=None, max_workers=None):
    app = Flask(__name__)
    CORS(app)

    if product_repo is None or movement_repo is None:
        from db.connection import engine
        from db.repositories import MovementRepository, ProductRepository

        _check_database(engine)
        product_repo = product_repo or ProductRepository(engine)
        movement_repo = movement_repo or MovementRepository(engine)

    app.config.update(
        PRODUCT_REPO=product_repo,
        MOVEMENT_REPO=movement_repo,
        CLOCK=clock or utc_now,
        RANDOM_SEED=random_seed if random_seed is not None else config.random_seed,
        MAX_WORKERS=max_workers or config.FORECAST_MAX_WORKERS,
    )

    @app.route("/api/v1/health", methods=["GET"])
    def health():
        return jsonify({"status": "ok"})

    @app.errorhandler(Exception)
    def handle_unexpected(e):
        if isinstance(e, HTTPException):
            return e
        logger.exception("Unhandled error while serving request")
        return _error(str(e), 500)

    app.register_blueprint(forecasting, url_prefix="/api/v1/forecasting")

    logger.info("🚀 Forecasting Flask service initialized successfully.")
    return app


if __name__ == "__main__":
    app = create_app()
    app.run(host=config.FLASK_HOST, port=config.FLASK_PORT)
