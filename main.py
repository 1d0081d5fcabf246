"""WSGI entrypoint for the recipe catalog API.

The Flask development server is intentionally not started from this module so
that deployments rely on Gunicorn. Local development can still use
``flask --app main run`` which imports the ``app`` object defined below, and
``flask --app main seed recipes.json`` loads a seed file into an empty store.
"""

import atexit

from recipe_catalog import create_app
from recipe_catalog.config import CatalogConfig, configure_logging

config = CatalogConfig.from_env()
configure_logging(config.log_level)

app = create_app(config=config)
atexit.register(app.config["RECIPE_SERVICE"].close)


__all__ = ["app"]
