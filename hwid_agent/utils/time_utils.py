# hwid_agent/utils/time_utils.py

import time


def now_ts():
    """Returns epoch timestamp"""
    return time.time()
