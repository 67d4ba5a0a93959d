# hwid_agent/probe/system_probe.py

import platform
import subprocess
from dataclasses import dataclass

from hwid_agent.utils.logger import logger

DEFAULT_TIMEOUT = 5

# machine-id is 32 hex chars + newline, product_uuid 36 chars
MAX_READ_BYTES = 4096


class ProbeError(Exception):
    """Raised when a command or file read yields nothing usable"""


@dataclass(frozen=True)
class CommandResult:
    returncode: int
    stdout: str
    stderr: str = ""


class SystemProbe:
    """
    Read-only access to the host: external utilities, fixed file paths
    and the generic facts reported by the `platform` module.
    """

    def __init__(self, command_timeout=DEFAULT_TIMEOUT):
        self.command_timeout = command_timeout

    # ---------------- COMMANDS ----------------

    def run(self, args):
        """
        Runs a utility and returns its stdout.
        Spawn failure, timeout and non-zero exit all raise ProbeError.
        """
        try:
            result = subprocess.run(
                list(args),
                capture_output=True,
                text=True,
                timeout=self.command_timeout,
                encoding="utf-8",
                errors="replace",
            )
        except FileNotFoundError:
            raise ProbeError(f"{args[0]}: not found")
        except subprocess.TimeoutExpired:
            raise ProbeError(f"{args[0]}: timed out after {self.command_timeout}s")
        except OSError as e:
            raise ProbeError(f"{args[0]}: {e}")

        outcome = CommandResult(result.returncode, result.stdout or "", result.stderr or "")
        if outcome.returncode != 0:
            raise ProbeError(f"{args[0]}: exit status {outcome.returncode}")

        logger.debug(f"Probe ran {' '.join(args)}")
        return outcome.stdout

    def hostname(self):
        name = self.run(["hostname"]).strip()
        if not name:
            raise ProbeError("hostname: empty output")
        return name

    # ---------------- FILES ----------------

    def read_text(self, path):
        try:
            with open(path, "r", encoding="utf-8") as f:
                return f.read(MAX_READ_BYTES)
        except (OSError, ValueError) as e:
            raise ProbeError(f"{path}: {e}")

    # ---------------- PLATFORM FACTS ----------------

    def os_name(self):
        return platform.system()

    def os_release(self):
        return platform.release()

    def os_version(self):
        return platform.version()

    def machine(self):
        return platform.machine()

    def mac_version(self):
        return platform.mac_ver()[0]

    def ios_info(self):
        """
        (release, model) on iOS builds of CPython, empty strings elsewhere
        """
        ios_ver = getattr(platform, "ios_ver", None)
        if ios_ver is None:
            return "", ""
        info = ios_ver()
        return info.release, info.model
