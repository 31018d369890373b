# wsgi.py
from app import create_social_app

application = create_social_app()
