import logging

from signdesk.config import Settings
from signdesk.schemas.auth import DemoUser
from signdesk.services.kv_store import KeyValueStore
from signdesk.services.latency import simulate_network
from signdesk.utils.security import generate_token, hash_password, verify_password

logger = logging.getLogger(__name__)

AUTH_USER_KEY = "auth_user"


class InvalidCredentialsError(Exception):
    pass


class AuthService:
    """Single-session demo login checked against a configured sample password."""

    def __init__(self, kv: KeyValueStore, config: Settings):
        self._kv = kv
        self._config = config
        self._password_hash = hash_password(config.demo_password)
        self._active_tokens: set[str] = set()

    def _user_for(self, email: str) -> DemoUser:
        if email == self._config.demo_admin_email:
            return DemoUser(id="1", email=email, name="Admin User", is_admin=True)
        return DemoUser(id="2", email=email, name=email.split("@")[0], is_admin=False)

    @property
    def current_user(self) -> DemoUser | None:
        stored = self._kv.get(AUTH_USER_KEY)
        if stored is None:
            return None
        return DemoUser.model_validate(stored)

    async def login(self, email: str, password: str) -> tuple[str, DemoUser]:
        await simulate_network("Login", self._config.login_delay_seconds)
        if not verify_password(self._password_hash, password):
            logger.warning("Rejected login for %s", email)
            raise InvalidCredentialsError("Invalid credentials")

        user = self._user_for(email)
        self._kv.set(AUTH_USER_KEY, user.model_dump(by_alias=True))
        # One logged-in user at a time, as in the browser demo.
        token = generate_token()
        self._active_tokens = {token}
        logger.info("Logged in %s (admin=%s)", user.email, user.is_admin)
        return token, user

    def logout(self):
        self._active_tokens.clear()
        self._kv.delete(AUTH_USER_KEY)

    def validate_token(self, token: str) -> DemoUser | None:
        if token not in self._active_tokens:
            return None
        return self.current_user
