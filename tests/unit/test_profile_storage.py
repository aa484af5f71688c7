"""
Unit tests for stylus_trace.storage.profile_storage module.
"""
import json

import pytest

from stylus_trace.core.config import SCHEMA_VERSION
from stylus_trace.core.errors import InvalidFormat, OutputError, UnsupportedVersion
from stylus_trace.core.types import HostIoSummary, HotPath, Profile
from stylus_trace.storage.profile_storage import read_profile, write_profile, write_svg


@pytest.fixture
def profile():
    return Profile(
        version=SCHEMA_VERSION,
        transaction_hash="0xabc",
        total_gas=30000,
        hostio_summary=HostIoSummary(total_calls=3, by_type={"storage_load": 2, "call": 1}, total_hostio_gas=2300),
        hot_paths=[
            HotPath(stack="call;call;SSTORE", gas=5000, percentage=16.67),
            HotPath(stack="call;SLOAD", gas=2100, percentage=7.0, source_hint={"file": "lib.rs", "line": 42}),
        ],
        generated_at="2026-01-01T00:00:00+00:00",
    )


class TestWriteProfile:

    def test_writes_pretty_json(self, tmp_path, profile):
        path = write_profile(profile, tmp_path / "profile.json")

        text = path.read_text()
        assert text.startswith("{\n  ")
        data = json.loads(text)
        assert data["version"] == SCHEMA_VERSION
        assert data["hostio_summary"]["by_type"] == {"storage_load": 2, "call": 1}
        assert "source_hint" not in data["hot_paths"][0]
        assert data["hot_paths"][1]["source_hint"] == {"file": "lib.rs", "line": 42}

    def test_creates_parent_directories(self, tmp_path, profile):
        path = write_profile(profile, tmp_path / "out" / "nested" / "profile.json")
        assert path.exists()

    def test_unwritable_destination(self, tmp_path, profile):
        # A directory cannot be opened for writing
        with pytest.raises(OutputError):
            write_profile(profile, tmp_path)


class TestReadProfile:

    def test_round_trip(self, tmp_path, profile):
        path = write_profile(profile, tmp_path / "profile.json")
        assert read_profile(path) == profile

    def test_unknown_fields_ignored(self, profile, temp_json_file):
        data = profile.to_dict()
        data["extra"] = {"anything": True}
        assert read_profile(temp_json_file(data)) == profile

    def test_minor_version_difference_accepted(self, profile, temp_json_file):
        data = profile.to_dict()
        data["version"] = "1.9.0"
        assert read_profile(temp_json_file(data)).version == "1.9.0"

    def test_major_version_mismatch(self, profile, temp_json_file):
        data = profile.to_dict()
        data["version"] = "2.0.0"

        with pytest.raises(UnsupportedVersion) as exc_info:
            read_profile(temp_json_file(data))
        assert exc_info.value.found == "2.0.0"
        assert exc_info.value.expected == SCHEMA_VERSION

    def test_missing_version(self, profile, temp_json_file):
        data = profile.to_dict()
        del data["version"]

        with pytest.raises(InvalidFormat):
            read_profile(temp_json_file(data))

    def test_missing_field(self, profile, temp_json_file):
        data = profile.to_dict()
        del data["hot_paths"]

        with pytest.raises(InvalidFormat):
            read_profile(temp_json_file(data))

    def test_malformed_by_type(self, profile, temp_json_file):
        data = profile.to_dict()
        data["hostio_summary"]["by_type"] = ["abc"]

        with pytest.raises(InvalidFormat):
            read_profile(temp_json_file(data))

    def test_not_an_object(self, temp_json_file):
        with pytest.raises(InvalidFormat):
            read_profile(temp_json_file([1, 2, 3]))

    def test_not_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")

        with pytest.raises(OutputError):
            read_profile(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(OutputError):
            read_profile(tmp_path / "missing.json")


class TestWriteSvg:

    def test_writes_content(self, tmp_path):
        path = write_svg("<svg></svg>", tmp_path / "graphs" / "tx.svg")
        assert path.read_text() == "<svg></svg>"
