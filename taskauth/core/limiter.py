"""Rate limiter instance for SlowAPI.

Shared so both main (app.state.limiter) and route modules can use the same
instance without circular imports. Limit strings live here.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

limiter = Limiter(key_func=get_remote_address)

LOGIN_LIMIT = "10/minute"
REGISTER_LIMIT = "5/minute"
# forgot-password sends e-mail and verify-otp guesses codes; both stay tight.
PASSWORD_RESET_LIMIT = "5/minute"
OTP_VERIFY_LIMIT = "10/minute"

limit_login = limiter.limit(LOGIN_LIMIT)
limit_register = limiter.limit(REGISTER_LIMIT)
limit_password_reset = limiter.limit(PASSWORD_RESET_LIMIT)
limit_otp_verify = limiter.limit(OTP_VERIFY_LIMIT)
