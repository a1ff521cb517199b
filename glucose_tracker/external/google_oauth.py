from collections import namedtuple
from urllib.parse import urlencode

import requests

GOOGLE_AUTH_URL = "https://accounts.google.com/o/oauth2/v2/auth"
GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
GOOGLE_USERINFO_URL = "https://openidconnect.googleapis.com/v1/userinfo"
GOOGLE_SCOPES = "openid email profile"

GoogleIdentity = namedtuple("GoogleIdentity", ["email", "external_id", "display_name"])


class OAuthExchangeError(Exception):
    pass


def _json(response):
    try:
        body = response.json()
    except ValueError as e:
        raise OAuthExchangeError("Google returned a non-JSON response") from e
    if not isinstance(body, dict):
        raise OAuthExchangeError("Google returned an unexpected response")
    return body


class GoogleOAuthClient:
    """Thin client for the authorization-code flow against Google."""

    def __init__(self, client_id, client_secret, redirect_uri, timeout=5):
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = redirect_uri
        self.timeout = timeout

    @classmethod
    def from_config(cls, config):
        return cls(
            client_id=config.get("GOOGLE_CLIENT_ID"),
            client_secret=config.get("GOOGLE_CLIENT_SECRET"),
            redirect_uri=config.get("GOOGLE_REDIRECT_URI"),
            timeout=config.get("GOOGLE_HTTP_TIMEOUT", 5)
        )

    @property
    def configured(self):
        return bool(self.client_id and self.client_secret)

    def build_authorization_url(self, state: str) -> str:
        params = {
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri,
            "response_type": "code",
            "scope": GOOGLE_SCOPES,
            "state": state,
            "access_type": "online",
            "prompt": "select_account",
        }
        return f"{GOOGLE_AUTH_URL}?{urlencode(params)}"

    def exchange_code_for_identity(self, code: str) -> GoogleIdentity:
        if not code:
            raise OAuthExchangeError("Missing authorization code")

        try:
            token_response = requests.post(
                GOOGLE_TOKEN_URL,
                data={
                    "code": code,
                    "client_id": self.client_id,
                    "client_secret": self.client_secret,
                    "redirect_uri": self.redirect_uri,
                    "grant_type": "authorization_code",
                },
                timeout=self.timeout
            )
        except requests.RequestException as e:
            raise OAuthExchangeError(f"Token request failed: {e}") from e

        if token_response.status_code != 200:
            raise OAuthExchangeError(f"Token exchange failed: {token_response.status_code}")

        access_token = _json(token_response).get("access_token")
        if not access_token:
            raise OAuthExchangeError("Token response did not include an access token")

        try:
            userinfo_response = requests.get(
                GOOGLE_USERINFO_URL,
                headers={"Authorization": f"Bearer {access_token}"},
                timeout=self.timeout
            )
        except requests.RequestException as e:
            raise OAuthExchangeError(f"Userinfo request failed: {e}") from e

        if userinfo_response.status_code != 200:
            raise OAuthExchangeError(f"Failed to fetch user info: {userinfo_response.status_code}")

        info = _json(userinfo_response)
        email = info.get("email")
        if not email:
            raise OAuthExchangeError("Google account did not return an email")

        return GoogleIdentity(
            email=email,
            external_id=info.get("sub"),
            display_name=info.get("name")
        )
