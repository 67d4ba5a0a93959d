# hwid_agent/utils/os_utils.py

import platform
import sys


def is_android():
    return sys.platform == "android" or hasattr(sys, "getandroidapilevel")


def is_ios():
    return sys.platform == "ios"


def is_windows():
    return platform.system() == "Windows"


def is_macos():
    return platform.system() == "Darwin" and not is_ios()


def is_linux():
    return platform.system() == "Linux" and not is_android()


def parse_os_release(text):
    """
    Parses /etc/os-release KEY=value lines into a dict
    """
    fields = {}
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, _, value = line.partition("=")
        fields[key.strip()] = value.strip().strip('"').strip("'")
    return fields
