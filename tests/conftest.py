"""Shared test fixtures."""

import pytest
from flask import Flask, abort, request
from flask_restx import Api, Namespace, Resource
from pydantic import BaseModel, Field
from werkzeug.exceptions import NotFound, ServiceUnavailable, Unauthorized

from response_builder import ResponseBuilder, error, success
from response_builder.api.error_handlers import register_restx_error_handlers
from response_builder.config.settings import CONFIG_MAP

APP_CODE_MAP = {
    500: "app.conflict",
    501: "app.greeting",
}

APP_MESSAGES = {
    "en": {
        "app.conflict": "Conflicting state",
        "app.greeting": "Hello {name}",
    },
    "pl": {
        "app.conflict": "Konflikt stanu",
    },
}


class ItemSchema(BaseModel):
    name: str = Field(..., min_length=1)
    quantity: int = Field(..., gt=0)


def create_app(config_name: str = "testing", **overrides) -> Flask:
    """Build a small Flask app exercising the extension."""
    app = Flask(__name__)
    app.config.from_object(CONFIG_MAP[config_name])
    app.config["RESPONSE_BUILDER_MAP"] = APP_CODE_MAP
    app.config["RESPONSE_BUILDER_MESSAGES"] = APP_MESSAGES
    app.config.update(overrides)

    ResponseBuilder(app)

    @app.get("/ping")
    def ping():
        return success(data={"pong": True})

    @app.get("/conflict")
    def conflict():
        return error(500, data={"k": "v"}, http_code=409)

    @app.get("/missing")
    def missing():
        raise NotFound()

    @app.get("/maintenance")
    def maintenance():
        raise ServiceUnavailable()

    @app.get("/private")
    def private():
        raise Unauthorized()

    @app.get("/teapot")
    def teapot():
        abort(418)

    @app.post("/items")
    def create_item():
        item = ItemSchema(**(request.get_json() or {}))
        return success(data=item.model_dump(), http_code=201)

    @app.get("/boom")
    def boom():
        raise RuntimeError("boom")

    api = Api(app, prefix="/api", doc=False)
    register_restx_error_handlers(api)
    ns = Namespace("items", description="Item endpoints")

    @ns.route("/<int:item_id>")
    class ItemDetail(Resource):
        def get(self, item_id: int):
            if item_id != 1:
                raise NotFound()
            return success(data={"id": item_id, "name": "widget"})

        def delete(self, item_id: int):
            raise RuntimeError("cannot delete")

    api.add_namespace(ns, path="/items")

    return app


@pytest.fixture()
def app():
    """Create an application instance configured for testing."""
    return create_app()


@pytest.fixture()
def client(app):
    """Flask test client."""
    return app.test_client()


@pytest.fixture()
def make_app():
    """Factory for apps with config overrides."""
    return create_app
