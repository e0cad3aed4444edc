"""Account lockout policy for the primary (password) login"""

from datetime import datetime, timedelta

from bankshield.domain.credentials import CredentialVerifier, PlaintextCredentialVerifier
from bankshield.domain.models import Account, LoginResult, LoginStatus
from bankshield.domain.rate_limits import RateLimitedAction
from bankshield.utils.date_utils import minutes_remaining

MAX_ATTEMPTS = 7
LOCKOUT_DURATION = timedelta(minutes=5)


class AccountLockoutPolicy(RateLimitedAction):
    """
    Per-account Active/Locked state machine.

    Transitions:
    - Locked and now < lockout_until: reject, counter untouched
    - Locked and now >= lockout_until: clear lock, counter back to 0, then evaluate
    - Active + good password: counter back to 0
    - Active + bad password: counter + 1, lock for 5 minutes once it reaches 7
    """

    name = "login_lockout"
    limit = MAX_ATTEMPTS
    duration = LOCKOUT_DURATION

    def __init__(self, verifier: CredentialVerifier | None = None):
        self.verifier = verifier or PlaintextCredentialVerifier()

    def is_exceeded(self, count: int) -> bool:
        return count >= self.limit

    def is_locked(self, account: Account, now: datetime) -> bool:
        return account.lockout_until is not None and now < account.lockout_until

    def attempt_login(self, account: Account, password: str, now: datetime) -> LoginResult:
        if self.is_locked(account, now):
            remaining = minutes_remaining(account.lockout_until, now)
            return LoginResult(
                status=LoginStatus.LOCKED,
                message=f"Too many failed attempts. Please try again in {remaining} minute(s).",
                lockout_minutes_remaining=remaining,
            )

        if account.lockout_until is not None:
            account.lockout_until = None
            account.failed_login_attempts = 0

        if self.verifier.verify(password, account.password):
            account.failed_login_attempts = 0
            account.lockout_until = None
            return LoginResult(status=LoginStatus.SUCCESS, message="Welcome back!")

        account.failed_login_attempts += 1
        if self.is_exceeded(account.failed_login_attempts):
            account.lockout_until = now + self.duration
            minutes = int(self.duration.total_seconds() // 60)
            return LoginResult(
                status=LoginStatus.LOCKED,
                message=f"Too many failed attempts. Your account has been locked for {minutes} minutes.",
                lockout_minutes_remaining=minutes,
            )

        remaining_attempts = self.limit - account.failed_login_attempts
        return LoginResult(
            status=LoginStatus.INVALID_CREDENTIALS,
            message=f"Invalid email or password. You have {remaining_attempts} attempt(s) remaining.",
            remaining_attempts=remaining_attempts,
        )
