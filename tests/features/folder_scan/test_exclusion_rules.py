import pytest

from constellation.features.folder_scan.data.exclusion_rules import ExclusionRules


@pytest.fixture
def windows_rules():
    return ExclusionRules("C:\\", include_system_dirs=False, platform="win32")


@pytest.mark.parametrize("path", [
    "C:\\Windows",
    "c:\\windows\\System32",
    "C:\\Program Files",
    "C:\\Program Files (x86)\\Steam",
    "C:\\$Recycle.Bin",
    "C:\\System Volume Information",
    "C:\\Recovery",
    "C:\\PerfLogs",
    "C:/ProgramData",
])
def test_reserved_windows_locations_are_excluded(windows_rules, path):
    assert windows_rules.is_excluded(path) is True


@pytest.mark.parametrize("path", [
    "C:\\Users\\alice\\AppData",
    "C:\\users\\BOB\\appdata\\Local\\Temp",
])
def test_user_appdata_is_excluded(windows_rules, path):
    assert windows_rules.is_excluded(path) is True


@pytest.mark.parametrize("path", [
    "C:\\Users",
    "C:\\Users\\alice",
    "C:\\Users\\alice\\Documents",
    "C:\\Users\\AppData",
    "C:\\WindowsApps",
    "D:\\Windows",
    "C:\\Projects\\Windows",
])
def test_regular_locations_are_kept(windows_rules, path):
    assert windows_rules.is_excluded(path) is False


def test_rules_follow_the_drive_of_the_scan_root():
    rules = ExclusionRules("D:\\data", platform="win32")

    assert rules.is_excluded("D:\\Windows") is True
    assert rules.is_excluded("C:\\Windows") is False


def test_including_system_dirs_disables_the_policy():
    rules = ExclusionRules("C:\\", include_system_dirs=True, platform="win32")

    assert rules.active is False
    assert rules.is_excluded("C:\\Windows") is False


@pytest.mark.parametrize("platform", ["linux", "darwin"])
def test_inactive_on_platforms_without_reserved_layout(platform):
    rules = ExclusionRules("/", platform=platform)

    assert rules.active is False
    assert rules.is_excluded("/Windows") is False
    assert rules.is_excluded("/Users/alice/AppData") is False


def test_root_inside_reserved_location_is_scanned_in_full():
    rules = ExclusionRules("C:\\Program Files\\App", platform="win32")

    assert rules.is_excluded("C:\\Program Files\\App\\plugins") is False
    assert rules.is_excluded("c:\\program files\\app\\Data\\Cache") is False
    assert rules.is_excluded("C:\\Program Files\\Other") is True
    assert rules.is_excluded("C:\\Windows") is True


def test_root_inside_appdata_is_scanned_in_full():
    rules = ExclusionRules("C:\\Users\\alice\\AppData\\Local", platform="win32")

    assert rules.is_excluded("C:\\Users\\alice\\AppData\\Local\\Temp") is False
    assert rules.is_excluded("C:\\Users\\alice\\AppData\\Roaming") is True


def test_rules_can_be_anchored_elsewhere():
    rules = ExclusionRules("/srv/image", platform="win32", anchor="/srv/image")

    assert rules.is_excluded("/srv/image/Windows") is True
    assert rules.is_excluded("/srv/image/Users/bob/AppData/Local") is True
    assert rules.is_excluded("/srv/image/Users/bob/Documents") is False
