from fastapi import Request

from chatbro.credentials import CredentialStore


def get_credential_store(request: Request) -> CredentialStore:
    return request.app.state.credentials
