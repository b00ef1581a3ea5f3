"""WSGI entrypoint for the recipe catalog API.

The Flask development server is not started from this module; production
deployments point Gunicorn at ``main:app``. Local development can use
``flask --app main run``. Configuration comes from the environment, see
:class:`recipe_catalog.config.Settings`.
"""

from recipe_catalog import create_app

app = create_app()


__all__ = ["app"]
