"""
Shared Flask extension instances.

Created as a separate module to avoid circular imports when route
blueprints need access to extensions that are initialised in the factory.
"""

from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

# Storage, default limits and the enabled flag come from the RATELIMIT_*
# config keys when init_app() runs.
limiter = Limiter(key_func=get_remote_address)
