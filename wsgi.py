"""
WSGI entry point
Used by Gunicorn for deployment
"""
import logging
import os

# Production unless the environment says otherwise
os.environ.setdefault('FLASK_ENV', 'production')

from jpa_to_er.web_app.app import app
from jpa_to_er.web_app.app_config import get_config

config = get_config()
if hasattr(config, 'validate'):
    config.validate()

# Create the log directory and route application logs
handlers = [logging.StreamHandler()]
if config.LOG_FILE:
    os.makedirs(os.path.dirname(config.LOG_FILE) or '.', exist_ok=True)
    handlers.append(logging.FileHandler(config.LOG_FILE))
logging.basicConfig(
    level=config.LOG_LEVEL,
    format='%(asctime)s %(name)s %(levelname)s: %(message)s',
    handlers=handlers
)

if __name__ == "__main__":
    app.run(host=config.HOST, port=config.PORT, debug=config.DEBUG)
else:
    # application object picked up by the WSGI server
    application = app
