"""
Per-IP throttle for the account endpoints.

slowapi keys each request by client address; the limiter is attached to
`app.state.limiter` in main.py. Tests switch it off through the autouse
fixture in conftest.py.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

REGISTER_LIMIT = "5/minute"
LOGIN_LIMIT = "10/minute"

limiter = Limiter(key_func=get_remote_address, enabled=True)
