"""AWS credential resolution for the Bedrock transport.

Credentials come from a named profile in the shared AWS config files. A
missing profile is not fatal: a warning is logged and the default
credential chain is used instead. The same applies to a profile that
exists but cannot produce credentials.
"""

from __future__ import annotations

import logging

import boto3
from botocore.exceptions import BotoCoreError
from pydantic import BaseModel

from chatwire.errors import CredentialResolutionError

logger = logging.getLogger(__name__)


class AwsCredentials(BaseModel):
    """A frozen set of AWS credentials."""

    access_key_id: str
    secret_access_key: str
    session_token: str | None = None


def _load_profile(profile: str | None) -> AwsCredentials | None:
    session = boto3.Session(profile_name=profile) if profile else boto3.Session()
    credentials = session.get_credentials()
    if credentials is None:
        return None
    frozen = credentials.get_frozen_credentials()
    return AwsCredentials(
        access_key_id=frozen.access_key,
        secret_access_key=frozen.secret_key,
        session_token=frozen.token,
    )


def resolve_credentials(profile: str | None) -> AwsCredentials:
    """Resolve credentials for *profile*, falling back to the default profile.

    Raises:
        CredentialResolutionError: If neither lookup yields credentials.
    """
    if profile:
        try:
            credentials = _load_profile(profile)
        except BotoCoreError as exc:
            logger.debug("Lookup for AWS profile %s failed: %s", profile, exc)
            credentials = None
        if credentials is not None:
            return credentials
        logger.warning(
            "AWS profile with name %s not found in ~/.aws/credentials, using default profile",
            profile,
        )

    try:
        credentials = _load_profile(None)
    except BotoCoreError as exc:
        raise CredentialResolutionError(profile, str(exc)) from exc
    if credentials is None:
        raise CredentialResolutionError(profile, "no credentials in default profile")
    return credentials
