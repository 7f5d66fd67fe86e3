"""Tests for the whimsy command line"""
import json
import pytest
from typer.testing import CliRunner
from whimsy import __version__
from whimsy.cli import app, main
from whimsy.data import SqliteData
from whimsy.entity import GeneratedEntity
from whimsy.generator import generate_single
from whimsy.words import words


runner = CliRunner()

MANIFEST = """
resources:
  - address: app
    type: whimsy_name
    triggers: {env: prod}
  - address: db
    type: whimsy_plant
lookups:
  - address: zone
    type: whimsy_animal
    triggers: {zone: a}
"""


@pytest.fixture
def in_project(whimsy_project, monkeypatch):
    """Run commands from inside a project with a manifest"""
    (whimsy_project / "whimsy.yaml").write_text(MANIFEST)
    monkeypatch.chdir(whimsy_project)
    return whimsy_project


def _stored(project):
    data = SqliteData(db_path=project / ".whimsy" / "whimsy.db")
    try:
        return {e.address: e.name for e in GeneratedEntity.list_all(data)}
    finally:
        data.close()


class TestStatelessCommands:
    """Commands that never touch the state store"""

    def test_version(self):
        """Test the version command"""
        result = runner.invoke(app, ["version"])
        assert result.exit_code == 0
        assert result.output.strip() == __version__

    def test_words(self):
        """Test listing a category"""
        result = runner.invoke(app, ["words", "color"])
        assert result.exit_code == 0
        assert result.output.split() == list(words("color"))

    def test_words_json(self):
        """Test listing a category as JSON"""
        result = runner.invoke(app, ["words", "plant", "--json"])
        assert json.loads(result.output) == list(words("plant"))

    def test_words_unknown_category(self):
        """Test an unknown category exits with code 2"""
        result = runner.invoke(app, ["words", "mineral"])
        assert result.exit_code == 2
        assert "invalid part 'mineral'" in result.output

    def test_pick_is_deterministic(self):
        """Test pick prints the seeded word"""
        result = runner.invoke(app, ["pick", "animal", "-t", "env=prod", "-t", "url=a=b"])
        assert result.exit_code == 0
        assert result.output.strip() == generate_single("animal", {"env": "prod", "url": "a=b"})

    def test_pick_bad_trigger(self):
        """Test a trigger without '=' is rejected"""
        result = runner.invoke(app, ["pick", "animal", "-t", "env"])
        assert result.exit_code == 2
        assert "key=value" in result.output

    def test_random(self):
        """Test random prints a catalog word"""
        result = runner.invoke(app, ["random", "plant"])
        assert result.exit_code == 0
        assert result.output.strip() in words("plant")

    def test_name_options(self, temp_dir, monkeypatch):
        """Test compound names from explicit parts"""
        monkeypatch.chdir(temp_dir)
        result = runner.invoke(app, ["name", "-p", "plant", "-p", "color", "-d", "_"])

        assert result.exit_code == 0
        plant, color = result.output.strip().split("_")
        assert plant in words("plant")
        assert color in words("color")

    def test_name_defaults(self, temp_dir, monkeypatch):
        """Test compound names use the default color-animal shape"""
        monkeypatch.chdir(temp_dir)
        result = runner.invoke(app, ["name"])

        color, animal = result.output.strip().split("-")
        assert color in words("color")
        assert animal in words("animal")

    def test_name_bad_part(self, temp_dir, monkeypatch):
        """Test an unknown part exits with code 2"""
        monkeypatch.chdir(temp_dir)
        result = runner.invoke(app, ["name", "-p", "plant", "-p", "rock"])
        assert result.exit_code == 2
        assert "invalid part 'rock'" in result.output


class TestProjectCommands:
    """Commands that read or write project state"""

    def test_init(self, temp_dir):
        """Test init creates the project layout"""
        target = temp_dir / "fresh"
        result = runner.invoke(app, ["init", str(target)])

        assert result.exit_code == 0
        assert (target / ".whimsy" / "config").exists()
        assert (target / ".whimsy" / "whimsy.db").exists()
        assert "resources:" in (target / "whimsy.yaml").read_text()

    def test_init_keeps_existing_manifest(self, temp_dir):
        """Test init without --force leaves a manifest alone"""
        target = temp_dir / "fresh"
        target.mkdir()
        (target / "whimsy.yaml").write_text("resources: []\n")

        runner.invoke(app, ["init", str(target)])
        assert (target / "whimsy.yaml").read_text() == "resources: []\n"

    def test_outside_project(self, temp_dir, monkeypatch):
        """Test state commands fail outside a project"""
        monkeypatch.chdir(temp_dir)
        result = runner.invoke(app, ["state"])
        assert result.exit_code == 2
        assert "Not in a whimsy project" in result.output

    def test_plan_then_apply(self, in_project):
        """Test plan reports creates and apply performs them"""
        planned = runner.invoke(app, ["plan"])
        assert planned.exit_code == 0
        assert "2 change(s) planned" in planned.output
        assert _stored(in_project) == {}

        applied = runner.invoke(app, ["apply", "--json"])
        assert applied.exit_code == 0
        result = json.loads(applied.output)
        assert set(result["resources"]) == {"app", "db"}
        assert result["lookups"]["zone"]["name"] == generate_single("animal", {"zone": "a"})
        assert _stored(in_project) == {
            "app": result["resources"]["app"]["name"],
            "db": result["resources"]["db"]["name"],
        }

    def test_apply_twice_keeps_names(self, in_project):
        """Test a second apply is a no-op"""
        runner.invoke(app, ["apply"])
        before = _stored(in_project)

        result = runner.invoke(app, ["apply"])
        assert result.exit_code == 0
        assert "(noop)" in result.output
        assert _stored(in_project) == before

        planned = runner.invoke(app, ["plan"])
        assert "0 change(s) planned" in planned.output

    def test_apply_bad_manifest(self, in_project):
        """Test schema errors exit with code 2"""
        (in_project / "bad.yaml").write_text("resources:\n  - address: x\n")
        result = runner.invoke(app, ["apply", "-f", "bad.yaml"])
        assert result.exit_code == 2
        assert "'type' is a required property" in result.output

    def test_show_state_destroy(self, in_project):
        """Test inspecting and removing entities"""
        runner.invoke(app, ["apply"])
        name = _stored(in_project)["db"]

        shown = runner.invoke(app, ["show", "db"])
        assert shown.exit_code == 0
        assert json.loads(shown.output)["name"] == name

        state = runner.invoke(app, ["state"])
        assert state.exit_code == 0
        assert "db" in state.output

        destroyed = runner.invoke(app, ["destroy", "db"])
        assert destroyed.exit_code == 0
        assert "db" not in _stored(in_project)

        missing = runner.invoke(app, ["show", "db"])
        assert missing.exit_code == 2

    def test_commands_close_the_state_store(self, in_project, monkeypatch):
        """Test every state command closes its database connection"""
        opened = []

        class RecordingData(SqliteData):
            def connect(self):
                opened.append(self)
                super().connect()

        monkeypatch.setattr("whimsy.cli.SqliteData", RecordingData)
        for args in (["plan"], ["apply"], ["state"], ["show", "db"], ["destroy", "db"], ["show", "db"]):
            runner.invoke(app, args)

        assert len(opened) == 6
        assert all(data._conn is None for data in opened)

    def test_config_set_and_get(self, in_project):
        """Test project config round trip"""
        result = runner.invoke(app, ["config", "default_delimiter", "_"])
        assert result.exit_code == 0

        result = runner.invoke(app, ["config", "default_delimiter"])
        assert result.output.strip() == "default_delimiter = _"

        name = runner.invoke(app, ["name"])
        assert "_" in name.output

    def test_config_rejects_bad_values(self, in_project):
        """Test invalid log levels and parts are refused"""
        assert runner.invoke(app, ["config", "log_level", "loud"]).exit_code == 2
        assert runner.invoke(app, ["config", "default_parts", "plant,rock"]).exit_code == 2

    def test_config_listing(self, in_project):
        """Test listing all settings"""
        result = runner.invoke(app, ["config"])
        assert "default_parts: color,animal" in result.output


class TestMain:
    """Test the programmatic entry point"""

    def test_main_returns_exit_code(self, capsys):
        """Test main returns command exit codes"""
        assert main(["version"]) == 0
        assert main(["words", "mineral"]) == 2

    def test_main_usage_error(self):
        """Test unknown commands do not raise"""
        assert main(["no-such-command"]) != 0
