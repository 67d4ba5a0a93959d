# hwid_agent/identity/headers.py

PLACEHOLDER = "unknown"

# header name -> DeviceIdentity attribute
HEADER_FIELDS = {
    "x-hwid": "hwid",
    "x-device-os": "device_os",
    "x-ver-os": "os_version",
    "x-device-model": "device_model",
    "user-agent": "user_agent",
}


def to_headers(identity):
    """
    Projects a device identity onto the outbound header set
    """
    headers = {}
    for header, attr in HEADER_FIELDS.items():
        value = getattr(identity, attr, None)
        headers[header] = str(value) if value else PLACEHOLDER
    return headers
