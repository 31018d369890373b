from flask import Flask


# The factory is imported inside the function; app/__init__ imports the services.
def get_app() -> Flask:
    from app import create_social_app
    return create_social_app()


def run_in_app_context(fn, *args, **kwargs):
    app = get_app()
    with app.app_context():
        return fn(*args, **kwargs)
