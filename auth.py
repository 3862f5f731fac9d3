import logging
import threading
import time
from dataclasses import dataclass
from typing import Optional, Sequence

import requests
from jose import JWTError, jwt
from passlib.context import CryptContext

logger = logging.getLogger(__name__)

# Password hashing (admin password)
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

FIREBASE_ISSUER_PREFIX = "https://securetoken.google.com/"
JWKS_CACHE_SECONDS = 60 * 60
JWKS_FETCH_TIMEOUT = 10

def hash_password(password: str) -> str:
    return pwd_context.hash(password)

def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


@dataclass(frozen=True)
class Identity:
    user_id: str
    email: Optional[str] = None
    display_name: Optional[str] = None
    photo_url: Optional[str] = None


class TokenVerifier:
    """Decode and verify a signed JWT against a key (secret, PEM or JWK set)."""

    def __init__(self, keys, algorithms: Sequence[str], audience: Optional[str] = None, issuer: Optional[str] = None):
        self._keys = keys
        self.algorithms = list(algorithms)
        self.audience = audience
        self.issuer = issuer

    def get_keys(self):
        return self._keys

    def verify(self, token: str) -> Optional[dict]:
        keys = self.get_keys()
        if not keys:
            return None
        try:
            return jwt.decode(
                token,
                keys,
                algorithms=self.algorithms,
                audience=self.audience,
                issuer=self.issuer,
                options={"verify_aud": self.audience is not None},
            )
        except JWTError as exc:
            logger.debug("Token verification failed: %s", exc)
            return None


class RemoteJWKSVerifier(TokenVerifier):
    """TokenVerifier whose JWK set is fetched over HTTP and cached."""

    def __init__(self, jwks_url: str, algorithms: Sequence[str], audience: Optional[str] = None, issuer: Optional[str] = None):
        super().__init__(None, algorithms, audience=audience, issuer=issuer)
        self.jwks_url = jwks_url
        self._fetched_at = 0.0
        self._lock = threading.Lock()

    def get_keys(self):
        with self._lock:
            if self._keys and time.monotonic() - self._fetched_at < JWKS_CACHE_SECONDS:
                return self._keys
            try:
                response = requests.get(self.jwks_url, timeout=JWKS_FETCH_TIMEOUT)
                response.raise_for_status()
                self._keys = response.json()
                self._fetched_at = time.monotonic()
            except (requests.RequestException, ValueError) as exc:
                # Keep serving the previous key set if there is one
                logger.warning("Could not refresh signing keys from %s: %s", self.jwks_url, exc)
            return self._keys


class IdentityStrategy:
    """Maps an inbound credential to an Identity. Selected once at startup."""

    name = "base"
    trusts_claimed_identity = False

    def authenticate(self, token: Optional[str] = None, claimed_user_id: Optional[str] = None) -> Optional[Identity]:
        raise NotImplementedError


class VerifiedTokenStrategy(IdentityStrategy):
    name = "verified-token"

    def __init__(self, verifier: TokenVerifier):
        self.verifier = verifier

    def authenticate(self, token=None, claimed_user_id=None):
        # A claimed identity is never honoured while tokens can be verified
        if not token:
            return None
        payload = self.verifier.verify(token)
        if not payload or not payload.get("sub"):
            return None
        email = payload.get("email")
        return Identity(
            user_id=payload["sub"],
            email=email.lower() if email else None,
            display_name=payload.get("name"),
            photo_url=payload.get("picture"),
        )


class TrustedHeaderStrategy(IdentityStrategy):
    """INSECURE: trusts the caller-supplied user id.

    Only selected when no identity provider is configured (local development).
    Anyone can impersonate anyone under this strategy.
    """

    name = "trusted-header"
    trusts_claimed_identity = True

    def authenticate(self, token=None, claimed_user_id=None):
        if not claimed_user_id:
            return None
        return Identity(user_id=claimed_user_id)


def firebase_verifier(project_id: str, jwks_url: str) -> TokenVerifier:
    return RemoteJWKSVerifier(
        jwks_url,
        algorithms=["RS256"],
        audience=project_id,
        issuer=f"{FIREBASE_ISSUER_PREFIX}{project_id}",
    )


def build_identity_strategy(settings) -> IdentityStrategy:
    if settings.firebase_project_id:
        logger.info("Identity: verifying tokens for project %s", settings.firebase_project_id)
        return VerifiedTokenStrategy(firebase_verifier(settings.firebase_project_id, settings.firebase_jwks_url))
    logger.warning(
        "Identity: FIREBASE_PROJECT_ID is not set, trusting the X-User-Id header. "
        "Never run this configuration where the identity provider is reachable."
    )
    return TrustedHeaderStrategy()
