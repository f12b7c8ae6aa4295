"""Sign-in and registration forms."""

import logging

import httpx

from blogapp.client.api_client import ApiError, BlogApiClient
from blogapp.forms.base import FormResult
from blogapp.forms.schemas import LoginSchema, RegistrationSchema, validate_form

logger = logging.getLogger(__name__)

SIGN_IN_FAILED = "Sign in failed. Please try again."
REGISTRATION_FAILED = "Registration error. Please try again."
AUTO_SIGN_IN_FAILED = "Account created, but automatic sign in failed. Please sign in."


class LoginForm:
    """Email and password sign-in."""

    def __init__(self, api: BlogApiClient):
        self.api = api

    async def submit(self, *, email: str, password: str) -> FormResult:
        credentials, errors = validate_form(LoginSchema, {"email": email, "password": password})
        if credentials is None:
            return FormResult.invalid(errors)

        try:
            user = await self.api.sign_in(email=credentials.email, password=credentials.password)
        except ApiError as e:
            return FormResult.failed(e.detail)
        except httpx.HTTPError as e:
            logger.error(f"[AUTH] Sign in request failed: {e}")
            return FormResult.failed(SIGN_IN_FAILED)
        return FormResult.ok(user)


class RegistrationForm:
    """
    Account creation followed by automatic sign-in.

    Registration returns a one-time custom token which is immediately
    exchanged at ``/auth/session`` for the session cookie.
    """

    def __init__(self, api: BlogApiClient):
        self.api = api

    async def submit(
        self,
        *,
        email: str,
        password: str,
        confirm_password: str,
        display_name: str,
    ) -> FormResult:
        registration, errors = validate_form(RegistrationSchema, {
            "email": email,
            "password": password,
            "confirmPassword": confirm_password,
            "displayName": display_name,
        })
        if registration is None:
            return FormResult.invalid(errors)

        try:
            account = await self.api.register(
                email=registration.email,
                password=registration.password,
                display_name=registration.display_name,
            )
        except ApiError as e:
            return FormResult.failed(e.detail)
        except httpx.HTTPError as e:
            logger.error(f"[AUTH] Registration request failed: {e}")
            return FormResult.failed(REGISTRATION_FAILED)

        try:
            user = await self.api.create_session(custom_token=account["customToken"])
        except (ApiError, httpx.HTTPError) as e:
            logger.warning(f"[AUTH] Session after registration failed for uid={account.get('uid')}: {e}")
            return FormResult(success=False, data=account, error=AUTO_SIGN_IN_FAILED)
        return FormResult.ok(user)
