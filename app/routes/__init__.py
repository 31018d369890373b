from ..resources import blp_social_publish


def register_social_routes(app, api):
    api.register_blueprint(blp_social_publish)
