#socials
from .social.publish_resource import blp_social_publish
