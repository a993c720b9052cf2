"""Configuration constants for the Rewind web backend."""

import os

DEFAULT_BACKEND_PORT = 8011
BACKEND_PORT_ENV_VARS = ("REWIND_BACKEND_PORT", "PORT")
WORKSPACE_ROOT = os.environ.get("REWIND_WORKSPACE_ROOT")
