from flask import Flask
from werkzeug.middleware.proxy_fix import ProxyFix
from marshmallow import ValidationError
from flask_smorest import Api

from .extensions import db, redis_connection
from .config import load_config
from .routes import register_social_routes
from .services.social.store import MongoPublishStore
from .utils.error_handlers import handle_validation_error


# instantiate social publishing app
def create_social_app(config_overrides=None, store=None):
    """
    config_overrides: extra app.config values (tests, workers)
    store: PublishStore to use instead of the MongoDB-backed one
    """
    app = Flask(__name__)

    #get actual client IP
    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_port=1, x_prefix=1)

    # Load configuration (ensure it does NOT override Flask-Smorest keys)
    load_config(app, config_overrides)

    app.config["API_TITLE"] = "Social Publishing API"
    app.config["API_VERSION"] = "v1"
    app.config["OPENAPI_VERSION"] = "3.0.3"
    app.config["OPENAPI_URL_PREFIX"] = "/api"
    app.config["OPENAPI_JSON_PATH"] = "openapi.json"
    app.config["OPENAPI_SWAGGER_UI_PATH"] = "/docs"
    app.config["OPENAPI_SWAGGER_UI_URL"] = "https://cdn.jsdelivr.net/npm/swagger-ui-dist/"

    api = Api(app)

    # Initialize extensions; the Mongo store is only wired when none is injected
    if store is None:
        db.init_app(app)
        store = MongoPublishStore()
    redis_connection.init_app(app)
    app.extensions["social_publish_store"] = store

    # Register custom error handlers
    app.errorhandler(ValidationError)(handle_validation_error)

    register_social_routes(app, api)

    return app
