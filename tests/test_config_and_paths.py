"""Tests for Config hierarchy and paths module"""
import pytest
from whimsy.config import Config
from whimsy.paths import (
    ensure_in_project,
    find_project_root,
    get_project_config_path,
    get_project_db_path,
    get_project_dir,
)


class TestProjectRootFinder:
    """Test find_project_root() and friends"""

    def test_find_project_root_at_root(self, whimsy_project):
        """Test finding the project root when at the root"""
        assert find_project_root(whimsy_project) == whimsy_project.resolve()

    def test_find_project_root_from_subdirectory(self, whimsy_project):
        """Test finding the project root from a subdirectory"""
        subdir = whimsy_project / "infra" / "envs" / "prod"
        subdir.mkdir(parents=True)

        assert find_project_root(subdir) == whimsy_project.resolve()

    def test_not_in_project(self, temp_dir):
        """Test a directory without .whimsy"""
        assert find_project_root(temp_dir) is None
        assert get_project_dir(temp_dir) is None
        assert get_project_config_path(temp_dir) is None
        assert get_project_db_path(temp_dir) is None

    def test_whimsy_file_is_not_a_project(self, temp_dir):
        """Test .whimsy must be a directory"""
        (temp_dir / ".whimsy").write_text("")
        assert find_project_root(temp_dir) is None

    def test_project_paths(self, whimsy_project):
        """Test the config and database locations"""
        root = whimsy_project.resolve()
        assert get_project_dir(whimsy_project) == root / ".whimsy"
        assert get_project_config_path(whimsy_project) == root / ".whimsy" / "config"
        assert get_project_db_path(whimsy_project) == root / ".whimsy" / "whimsy.db"

    def test_ensure_in_project(self, whimsy_project, temp_dir):
        """Test ensure_in_project returns the root or raises"""
        assert ensure_in_project(whimsy_project) == whimsy_project.resolve()
        with pytest.raises(RuntimeError) as exc_info:
            ensure_in_project(temp_dir)
        assert "whimsy init" in str(exc_info.value)


class TestConfigHierarchy:
    """Test Config with hierarchical lookup"""

    def test_defaults(self, temp_dir):
        """Test built-in defaults when nothing is set"""
        config = Config(config_path=temp_dir / "cfg.yaml", enable_hierarchy=False)

        assert config.default_parts == ["color", "animal"]
        assert config.default_delimiter == "-"
        assert config.default_random is False
        assert config.log_level == "WARNING"
        assert config.manifest == "whimsy.yaml"
        assert config.name_defaults() == {"parts": ["color", "animal"], "delimiter": "-", "random": False}

    def test_save_and_reload(self, temp_dir):
        """Test setters persist across reloads"""
        path = temp_dir / "cfg.yaml"
        config = Config(config_path=path, enable_hierarchy=False)
        config.default_parts = ["plant", "color"]
        config.default_delimiter = "_"
        config.default_random = True
        config.log_level = "debug"
        config.save()

        loaded = Config(config_path=path, enable_hierarchy=False)
        assert loaded.default_parts == ["plant", "color"]
        assert loaded.default_delimiter == "_"
        assert loaded.default_random is True
        assert loaded.log_level == "DEBUG"

    def test_string_values_from_cli(self, temp_dir):
        """Test values stored as strings are coerced"""
        config = Config(config_path=temp_dir / "cfg.yaml", enable_hierarchy=False)
        config.set("default_parts", "plant, animal")
        config.set("default_random", "yes")
        config.set("log_level", "loud")

        assert config.default_parts == ["plant", "animal"]
        assert config.default_random is True
        assert config.log_level == "WARNING"

    def test_local_overrides_global(self, temp_dir):
        """Test project values override global ones"""
        global_path = temp_dir / "global.yaml"
        global_config = Config(config_path=global_path, enable_hierarchy=False)
        global_config.default_delimiter = "."
        global_config.log_level = "INFO"
        global_config.save()

        local_path = temp_dir / "local.yaml"
        local_config = Config(config_path=local_path, enable_hierarchy=False)
        local_config.default_delimiter = "_"
        local_config.save()

        config = Config(config_path=local_path, global_path=global_path)
        assert config.default_delimiter == "_"
        assert config.log_level == "INFO"

    def test_hierarchy_disabled(self, temp_dir):
        """Test global values are ignored without hierarchy"""
        global_path = temp_dir / "global.yaml"
        global_path.write_text("log_level: ERROR\n")
        config = Config(config_path=temp_dir / "local.yaml", enable_hierarchy=False, global_path=global_path)
        assert config.log_level == "WARNING"

    def test_invalid_file(self, temp_dir):
        """Test unreadable config raises RuntimeError"""
        path = temp_dir / "cfg.yaml"
        path.write_text("- just\n- a list\n")
        with pytest.raises(RuntimeError) as exc_info:
            Config(config_path=path, enable_hierarchy=False)
        assert "Failed to load config" in str(exc_info.value)


class TestConfigWithProjectContext:
    """Test Config.load_with_project_context()"""

    def test_in_project(self, whimsy_project):
        """Test loading config inside a project"""
        local_path = whimsy_project / ".whimsy" / "config"
        local = Config(config_path=local_path, enable_hierarchy=False)
        local.default_delimiter = "+"
        local.save()

        config = Config.load_with_project_context(start_path=whimsy_project)
        assert config.config_path == local_path.resolve()
        assert config.enable_hierarchy is True
        assert config.default_delimiter == "+"

    def test_outside_project(self, temp_dir, isolated_global_config):
        """Test loading falls back to the global config"""
        isolated_global_config.write_text("default_delimiter: '.'\n")

        config = Config.load_with_project_context(start_path=temp_dir)
        assert config.config_path == isolated_global_config
        assert config.enable_hierarchy is False
        assert config.default_delimiter == "."
