"""Sending WhatsApp messages through the Fonnte gateway."""

from __future__ import annotations

import os
from http import HTTPStatus

import requests

from ragamaya.exceptions import ApiException

SEND_URL = "https://api.fonnte.com/send"


def send(target: str, message: str, api_key: str | None = None, session=None) -> str:
    """Send ``message`` to ``target`` and return the gateway's response body.

    ``api_key`` defaults to FONNTE_API_KEY. The gateway's status is printed,
    not checked; failing to reach it raises a 500 ApiException.
    """
    if api_key is None:
        api_key = os.environ.get("FONNTE_API_KEY", "")
    form = {"target": (None, target), "message": (None, message)}
    headers = {"Authorization": api_key}

    try:
        if session is None:
            with requests.Session() as own_session:
                response = own_session.post(SEND_URL, files=form, headers=headers)
        else:
            response = session.post(SEND_URL, files=form, headers=headers)
    except requests.RequestException as exc:
        raise ApiException(
            HTTPStatus.INTERNAL_SERVER_ERROR, f"error sending request: {exc}"
        ) from exc

    try:
        body = response.text
    except requests.RequestException as exc:
        raise ApiException(
            HTTPStatus.INTERNAL_SERVER_ERROR, f"error reading response: {exc}"
        ) from exc

    print(f"Status: {response.status_code} {response.reason}")
    print(f"Response: {body}")
    return body