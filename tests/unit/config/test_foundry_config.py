"""
Unit tests for foundry.toml parser.
"""

import pytest
from pathlib import Path
from zkbuild.config.foundry_config import (
    ConfigNotFoundError,
    FoundryConfig,
    FoundryConfigError,
    Remapping,
    RemappingTable,
)


class TestFoundryConfig:
    """Test suite for FoundryConfig parser."""

    @pytest.fixture
    def tmp_toml_path(self, tmp_path):
        """Fixture to provide a temporary foundry.toml path."""
        return tmp_path / "foundry.toml"

    @pytest.fixture
    def profile_config(self, tmp_toml_path):
        """Create config with profile remappings and directories."""
        content = """
[profile.default]
src = "src"
out = "zk-out"
remappings = [
    "@openzeppelin/=lib/openzeppelin-contracts/",
    "forge-std/ = lib/forge-std/src/",
]
"""
        tmp_toml_path.write_text(content)
        return tmp_toml_path

    @pytest.fixture
    def top_level_config(self, tmp_toml_path):
        """Create config with top-level remappings only."""
        content = """
remappings = ["@lib/=vendor/lib/"]
"""
        tmp_toml_path.write_text(content)
        return tmp_toml_path

    def test_missing_file(self, tmp_path):
        """Test that a missing file raises ConfigNotFoundError."""
        with pytest.raises(ConfigNotFoundError, match="not found"):
            FoundryConfig(tmp_path / "foundry.toml")

    def test_missing_file_is_file_not_found(self, tmp_path):
        """Test ConfigNotFoundError can be handled as FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            FoundryConfig(tmp_path / "foundry.toml")

    def test_invalid_toml(self, tmp_toml_path):
        """Test that invalid TOML raises FoundryConfigError."""
        tmp_toml_path.write_text("[profile.default\nsrc = ")
        with pytest.raises(FoundryConfigError, match="Failed to parse"):
            FoundryConfig(tmp_toml_path)

    def test_profile_remappings(self, profile_config, tmp_path):
        """Test remappings are read from the default profile in order."""
        table = FoundryConfig(profile_config).get_remappings()

        assert [r.prefix for r in table] == ["@openzeppelin/", "forge-std/"]
        assert table.entries[0].target == tmp_path.resolve() / "lib" / "openzeppelin-contracts"
        assert table.entries[1].target == tmp_path.resolve() / "lib" / "forge-std" / "src"

    def test_top_level_remappings(self, top_level_config, tmp_path):
        """Test top-level remappings are used when the profile has none."""
        table = FoundryConfig(top_level_config).get_remappings()

        assert len(table) == 1
        assert table.entries[0].prefix == "@lib/"
        assert table.entries[0].target == tmp_path.resolve() / "vendor" / "lib"

    def test_no_remappings(self, tmp_toml_path):
        """Test a config without remappings yields an empty table."""
        tmp_toml_path.write_text("[profile.default]\nsrc = 'contracts'\n")
        assert len(FoundryConfig(tmp_toml_path).get_remappings()) == 0

    def test_remappings_not_a_list(self, tmp_toml_path):
        """Test a non-list remappings value is rejected."""
        tmp_toml_path.write_text('remappings = "a=b"\n')
        with pytest.raises(FoundryConfigError, match="list of strings"):
            FoundryConfig(tmp_toml_path).get_remappings()

    def test_remapping_without_equals(self, tmp_toml_path):
        """Test an entry without '=' is rejected."""
        tmp_toml_path.write_text('remappings = ["@lib/"]\n')
        with pytest.raises(FoundryConfigError, match="prefix=target"):
            FoundryConfig(tmp_toml_path).get_remappings()

    def test_other_profile(self, tmp_toml_path, tmp_path):
        """Test selecting a non-default profile."""
        tmp_toml_path.write_text("""
[profile.default]
remappings = ["a/=default/"]

[profile.zk]
remappings = ["a/=zk/"]
""")
        table = FoundryConfig(tmp_toml_path, profile="zk").get_remappings()
        assert table.entries[0].target == tmp_path.resolve() / "zk"

    def test_source_and_output_dirs(self, profile_config, tmp_path):
        """Test src/out come from the profile."""
        config = FoundryConfig(profile_config)
        assert config.get_source_dir() == tmp_path.resolve() / "src"
        assert config.get_output_dir() == tmp_path.resolve() / "zk-out"

    def test_default_source_and_output_dirs(self, top_level_config, tmp_path):
        """Test src/out fall back to contracts/out."""
        config = FoundryConfig(top_level_config)
        assert config.get_source_dir() == tmp_path.resolve() / "contracts"
        assert config.get_output_dir() == tmp_path.resolve() / "out"


class TestRemappingTable:
    """Test suite for RemappingTable lookups."""

    def test_parse_splits_on_first_equals(self, tmp_path):
        """Test only the first '=' separates prefix and target."""
        remapping = Remapping.parse("a/=b=c/", tmp_path)
        assert remapping.prefix == "a/"
        assert remapping.target == tmp_path / "b=c"

    def test_absolute_target_kept(self, tmp_path):
        """Test absolute targets are not re-anchored."""
        target = tmp_path / "abs"
        remapping = Remapping.parse(f"x/={target}", Path("/elsewhere"))
        assert remapping.target == target

    def test_empty_prefix_rejected(self, tmp_path):
        """Test '=target' is rejected."""
        with pytest.raises(FoundryConfigError, match="empty prefix"):
            Remapping.parse("=lib/", tmp_path)

    def test_first_match_wins(self, tmp_path):
        """Test lookup uses table order, not the longest prefix."""
        table = RemappingTable.from_entries(["@oz/=short/", "@oz/contracts/=long/"], tmp_path)
        assert table.match("@oz/contracts/token/ERC20.sol").target == tmp_path / "short"

    def test_no_match(self, tmp_path):
        """Test lookup returns None without a matching prefix."""
        table = RemappingTable.from_entries(["@oz/=lib/oz/"], tmp_path)
        assert table.match("./Local.sol") is None

    def test_duplicate_prefix_keeps_first(self, tmp_path):
        """Test the first entry for a prefix is kept."""
        table = RemappingTable.from_entries(["a/=first/", "a/=second/"], tmp_path)
        assert len(table) == 1
        assert table.entries[0].target == tmp_path / "first"

    def test_from_entries_preserves_order(self, tmp_path):
        """Test entry order becomes table order."""
        table = RemappingTable.from_entries(["b/=bb", "a/=aa"], tmp_path)
        assert [r.prefix for r in table] == ["b/", "a/"]
