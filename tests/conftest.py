import pytest

from hwid_agent.probe.system_probe import ProbeError


class FakeProbe:
    """
    Deterministic stand-in for SystemProbe.

    commands maps an argv tuple to stdout (or an exception to raise),
    files maps a path to its contents. Anything missing raises ProbeError.
    """

    def __init__(self, commands=None, files=None, os_name="Linux", os_release="6.1.0",
                 os_version="#1 SMP", machine="x86_64", mac_version="", ios_info=("", "")):
        self.commands = dict(commands or {})
        self.files = dict(files or {})
        self._os_name = os_name
        self._os_release = os_release
        self._os_version = os_version
        self._machine = machine
        self._mac_version = mac_version
        self._ios_info = ios_info
        self.calls = []

    def run(self, args):
        key = tuple(args)
        self.calls.append(("run", key))
        if key not in self.commands:
            raise ProbeError(f"{args[0]}: not found")
        outcome = self.commands[key]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    def hostname(self):
        name = self.run(["hostname"]).strip()
        if not name:
            raise ProbeError("hostname: empty output")
        return name

    def read_text(self, path):
        self.calls.append(("read", path))
        if path not in self.files:
            raise ProbeError(f"{path}: No such file or directory")
        return self.files[path]

    def os_name(self):
        return self._os_name

    def os_release(self):
        return self._os_release

    def os_version(self):
        return self._os_version

    def machine(self):
        return self._machine

    def mac_version(self):
        return self._mac_version

    def ios_info(self):
        return self._ios_info

    def probe_calls(self):
        return len(self.calls)


@pytest.fixture
def fake_probe():
    return FakeProbe()


@pytest.fixture
def fixed_clock():
    return lambda: 1700000000.0
