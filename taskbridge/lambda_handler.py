"""AWS Lambda entry point.

Mangum translates API Gateway events into ASGI so the FastAPI app serves the
bridge routes unchanged.
"""

from mangum import Mangum

from taskbridge.config import get_settings
from taskbridge.main import app, configure_logging

# The Lambda runtime installs its own root handler before import
configure_logging(get_settings().log_level, force=True)

handler = Mangum(app, lifespan="off")
