# hwid_agent/identity/platforms.py

import re
from enum import Enum

from hwid_agent.identity.resolver import resolve_identifier
from hwid_agent.probe.system_probe import ProbeError
from hwid_agent.utils import os_utils
from hwid_agent.utils.logger import logger

COMPOSITE_DELIMITER = "-"
UNKNOWN_MODEL = "Unknown Device"
UNKNOWN_VALUE = "unknown"

MACHINE_ID_PATH = "/etc/machine-id"
DBUS_MACHINE_ID_PATH = "/var/lib/dbus/machine-id"
DMI_PRODUCT_UUID_PATH = "/sys/class/dmi/id/product_uuid"
DMI_PRODUCT_NAME_PATH = "/sys/class/dmi/id/product_name"
OS_RELEASE_PATH = "/etc/os-release"

WINDOWS_CRYPTOGRAPHY_KEY = r"HKEY_LOCAL_MACHINE\SOFTWARE\Microsoft\Cryptography"

MACHINE_GUID_RE = re.compile(r"MachineGuid\s+REG_SZ\s+([A-F0-9-]+)", re.IGNORECASE)
UUID_RE = re.compile(r"\b([A-F0-9]{8}-[A-F0-9]{4}-[A-F0-9]{4}-[A-F0-9]{4}-[A-F0-9]{12})\b", re.IGNORECASE)
HARDWARE_UUID_RE = re.compile(r"Hardware UUID:\s+([A-F0-9-]+)", re.IGNORECASE)
PLATFORM_UUID_RE = re.compile(r'"IOPlatformUUID"\s*=\s*"([A-F0-9-]+)"', re.IGNORECASE)

# firmware placeholders that are not unique to a machine
PLACEHOLDER_UUIDS = {
    "FFFFFFFF-FFFF-FFFF-FFFF-FFFFFFFFFFFF",
    "00000000-0000-0000-0000-000000000000",
}


class Platform(Enum):
    ANDROID = "Android"
    IOS = "iOS"
    WINDOWS = "Windows"
    MACOS = "macOS"
    LINUX = "Linux"
    OTHER = "Other"


def detect_platform():
    """
    Maps the running interpreter onto one of the supported platforms
    """
    # android and ios report Linux/Darwin kernels, check them first
    if os_utils.is_android():
        return Platform.ANDROID
    if os_utils.is_ios():
        return Platform.IOS
    if os_utils.is_windows():
        return Platform.WINDOWS
    if os_utils.is_macos():
        return Platform.MACOS
    if os_utils.is_linux():
        return Platform.LINUX
    return Platform.OTHER


def _first_match(pattern, text):
    match = pattern.search(text or "")
    if not match:
        return ""
    return match.group(1).strip()


def _join(*parts):
    return COMPOSITE_DELIMITER.join(p for p in parts if p)


# --------------------------------------------------
# BASE COLLECTOR
# --------------------------------------------------

class PlatformCollector:
    """
    Gathers raw identifier material and metadata for one platform.

    Subclasses list their tiers in priority order; each tier returns a
    string (empty means "nothing found") or raises.
    """

    platform = Platform.OTHER

    def __init__(self, probe):
        self.probe = probe

    def identifier_tiers(self):
        return [("generic_os", self._generic_os_tier)]

    def collect_raw_identifier(self, clock=None):
        """
        Composite identifier from the first tier that yields one
        """
        return resolve_identifier(self, clock=clock).composite

    # ---------------- METADATA ----------------

    def device_os(self):
        if self.platform is not Platform.OTHER:
            return self.platform.value
        try:
            name = (self.probe.os_name() or "").strip()
        except Exception as e:
            logger.debug(f"Generic OS name unavailable: {e}")
            name = ""
        return name or Platform.OTHER.value

    def collect_os_version(self):
        return self._best_effort("os_version", self._os_version, self.generic_os_version)

    def collect_model(self):
        return self._best_effort("device_model", self._model, self.generic_model)

    def generic_os_version(self):
        for reader in (self.probe.os_release, self.probe.os_version):
            try:
                value = (reader() or "").strip()
            except Exception:
                continue
            if value:
                return value
        return UNKNOWN_VALUE

    def generic_model(self):
        try:
            machine = (self.probe.machine() or "").strip()
        except Exception:
            machine = ""
        return machine or UNKNOWN_MODEL

    def _best_effort(self, field, reader, fallback):
        try:
            value = (reader() or "").strip()
        except Exception as e:
            logger.debug(f"{self.platform.value} {field} lookup failed: {e}")
            value = ""
        return value or fallback()

    def _os_version(self):
        return self.generic_os_version()

    def _model(self):
        return self.generic_model()

    # ---------------- SHARED TIERS ----------------

    def _optional_hostname(self):
        try:
            return self.probe.hostname()
        except ProbeError as e:
            logger.debug(f"hostname unavailable: {e}")
            return ""

    def _generic_os_tier(self):
        return _join(self._optional_hostname(), self.probe.os_name(), self.generic_os_version())


# --------------------------------------------------
# ANDROID
# --------------------------------------------------

class AndroidCollector(PlatformCollector):
    platform = Platform.ANDROID

    def identifier_tiers(self):
        return [
            ("android_build_props", self._build_props_tier),
            ("android_host_release", self._host_release_tier),
        ]

    def _getprop(self, name):
        try:
            return self.probe.run(["getprop", name]).strip()
        except ProbeError as e:
            logger.debug(f"getprop {name} failed: {e}")
            return ""

    def _android_id(self):
        try:
            value = self.probe.run(["settings", "get", "secure", "android_id"]).strip()
        except ProbeError as e:
            logger.debug(f"android_id unavailable: {e}")
            return ""
        return "" if value == "null" else value

    def _build_props_tier(self):
        return _join(
            self._android_id(),
            self._getprop("ro.build.fingerprint"),
            self._getprop("ro.product.manufacturer"),
            self._getprop("ro.product.brand"),
            self._getprop("ro.product.model"),
        )

    def _host_release_tier(self):
        return _join(self.probe.hostname(), self._getprop("ro.build.version.release"))

    def _os_version(self):
        return self._getprop("ro.build.version.release")

    def _model(self):
        manufacturer = self._getprop("ro.product.manufacturer")
        model = self._getprop("ro.product.model")
        return " ".join(p for p in (manufacturer, model) if p)


# --------------------------------------------------
# IOS
# --------------------------------------------------

class IOSCollector(PlatformCollector):
    platform = Platform.IOS

    def identifier_tiers(self):
        return [
            ("ios_vendor_id", self._vendor_id_tier),
            ("ios_model", self._model),
        ]

    def _vendor_id_tier(self):
        from rubicon.objc import ObjCClass

        device = ObjCClass("UIDevice").currentDevice
        vendor_id = device.identifierForVendor
        if vendor_id is None:
            return ""
        return str(vendor_id.UUIDString)

    def _os_version(self):
        release, _ = self.probe.ios_info()
        return release

    def _model(self):
        _, model = self.probe.ios_info()
        if model:
            return model
        return self.probe.run(["sysctl", "-n", "hw.machine"]).strip()


# --------------------------------------------------
# WINDOWS
# --------------------------------------------------

class WindowsCollector(PlatformCollector):
    platform = Platform.WINDOWS

    def identifier_tiers(self):
        return [
            ("windows_machine_guid", self._machine_guid_tier),
            ("windows_product_uuid", self._product_uuid_tier),
            ("windows_host_build", self._host_build_tier),
        ]

    def _machine_guid_tier(self):
        output = self.probe.run(["reg", "query", WINDOWS_CRYPTOGRAPHY_KEY, "/v", "MachineGuid"])
        return _first_match(MACHINE_GUID_RE, output)

    def _product_uuid_tier(self):
        output = self.probe.run(["wmic", "csproduct", "get", "UUID"])
        value = _first_match(UUID_RE, output)
        if value.upper() in PLACEHOLDER_UUIDS:
            return ""
        return value

    def _host_build_tier(self):
        return _join(self.probe.hostname(), self.probe.os_version())

    def _os_version(self):
        return self.probe.os_version()

    def _model(self):
        try:
            output = self.probe.run(["wmic", "computersystem", "get", "model"])
        except ProbeError as e:
            logger.debug(f"wmic model query failed: {e}")
            output = ""

        # first line is the "Model" column header
        lines = [line.strip() for line in output.splitlines() if line.strip()]
        if len(lines) > 1:
            return lines[1]

        version = self.probe.os_version() or ""
        major_minor = ".".join(version.split(".")[:2])
        return f"Windows {major_minor}" if major_minor else ""


# --------------------------------------------------
# MACOS
# --------------------------------------------------

class MacOSCollector(PlatformCollector):
    platform = Platform.MACOS

    def identifier_tiers(self):
        return [
            ("macos_hardware_uuid", self._hardware_uuid_tier),
            ("macos_platform_uuid", self._platform_uuid_tier),
            ("macos_host_version", self._host_version_tier),
        ]

    def _hardware_uuid_tier(self):
        output = self.probe.run(["system_profiler", "SPHardwareDataType"])
        return _first_match(HARDWARE_UUID_RE, output)

    def _platform_uuid_tier(self):
        output = self.probe.run(["ioreg", "-rd1", "-c", "IOPlatformExpertDevice"])
        return _first_match(PLATFORM_UUID_RE, output)

    def _host_version_tier(self):
        return _join(self.probe.hostname(), self.collect_os_version())

    def _os_version(self):
        try:
            version = self.probe.run(["sw_vers", "-productVersion"]).strip()
        except ProbeError as e:
            logger.debug(f"sw_vers failed: {e}")
            version = ""
        return version or self.probe.mac_version()

    def _model(self):
        return self.probe.run(["sysctl", "-n", "hw.model"]).strip()


# --------------------------------------------------
# LINUX
# --------------------------------------------------

class LinuxCollector(PlatformCollector):
    platform = Platform.LINUX

    def identifier_tiers(self):
        return [
            ("linux_machine_id", lambda: self._read_id(MACHINE_ID_PATH)),
            ("linux_dbus_machine_id", lambda: self._read_id(DBUS_MACHINE_ID_PATH)),
            ("linux_dmi_product_uuid", lambda: self._read_id(DMI_PRODUCT_UUID_PATH)),
            ("linux_os_release", self._os_release_tier),
        ]

    def _read_id(self, path):
        return self.probe.read_text(path).strip()

    def _os_release(self):
        try:
            return os_utils.parse_os_release(self.probe.read_text(OS_RELEASE_PATH))
        except ProbeError as e:
            logger.debug(f"os-release unavailable: {e}")
            return {}

    def _os_release_tier(self):
        release = self._os_release()
        name = release.get("NAME") or self.probe.os_name()
        version = release.get("VERSION") or release.get("VERSION_ID") or self.generic_os_version()
        return _join(self._optional_hostname(), name, version)

    def _os_version(self):
        return self._os_release().get("VERSION_ID", "")

    def _model(self):
        try:
            product = self.probe.read_text(DMI_PRODUCT_NAME_PATH).strip()
        except ProbeError as e:
            logger.debug(f"DMI product name unavailable: {e}")
            product = ""
        return product or self._os_release().get("NAME", "")


COLLECTORS = {
    Platform.ANDROID: AndroidCollector,
    Platform.IOS: IOSCollector,
    Platform.WINDOWS: WindowsCollector,
    Platform.MACOS: MacOSCollector,
    Platform.LINUX: LinuxCollector,
    Platform.OTHER: PlatformCollector,
}


def collector_for(platform, probe):
    return COLLECTORS[platform](probe)
