# hwid_agent/sender/api_client.py

import requests

from hwid_agent.identity.headers import to_headers
from hwid_agent.utils.logger import logger

DEFAULT_API_URL = "http://127.0.0.1:5000/api/devices"
DEFAULT_TIMEOUT = 5


def build_headers(identity):
    headers = {
        "Content-Type": "application/json"
    }
    headers.update(to_headers(identity))
    return headers


def send_payload(payload, identity, api_url=DEFAULT_API_URL, timeout=DEFAULT_TIMEOUT):
    """
    Sends payload to backend with the device identity headers attached
    """
    try:
        response = requests.post(
            api_url,
            json=payload,
            headers=build_headers(identity),
            timeout=timeout
        )
    except requests.RequestException as e:
        logger.warning(f"Failed to reach backend {api_url}: {e}")
        return False

    if response.status_code not in (200, 201):
        logger.warning(f"Backend returned status {response.status_code}")
        return False

    return True
