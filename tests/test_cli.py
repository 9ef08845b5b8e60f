"""
End-to-end tests for the command line interface.

Each test runs ``main`` with real files under a temporary working directory,
so the default ``../output/cleaned_links.csv`` lands inside ``tmp_path``.
"""

import sqlite3

import pytest

from pocket_cleaner import __version__
from pocket_cleaner.cli import CLIInterface, main
from pocket_cleaner.utils.error_handler import UsageError
from tests.fixtures.test_data import (
    FIRST_EXPORT_ROWS,
    OUTPUT_HEADER,
    SECOND_EXPORT_ROWS,
)


@pytest.fixture
def exports(temp_dir, write_csv):
    write_csv(temp_dir / "first.csv", FIRST_EXPORT_ROWS)
    write_csv(temp_dir / "second.csv", SECOND_EXPORT_ROWS)
    return temp_dir


class TestArgumentHandling:
    """Tests for argument parsing and validation."""

    def test_no_arguments_prints_usage(self, work_dir, capsys):
        assert main([]) == 1

        err = capsys.readouterr().err
        assert "Usage: pocket-cleaner <file.csv|directory> [--destination-path=<path>]" in err

    def test_validate_args_requires_input(self):
        cli = CLIInterface()

        with pytest.raises(UsageError):
            cli.validate_args(cli.parse_args([]))

    def test_validate_args_values(self):
        cli = CLIInterface()
        args = cli.parse_args(["exports", "--destination-path=pocket.db", "-o", "out.csv", "-v"])

        validated = cli.validate_args(args)

        assert str(validated["input_path"]) == "exports"
        assert str(validated["destination_path"]) == "pocket.db"
        assert validated["output_path"] == "out.csv"
        assert validated["config_path"] is None
        assert validated["verbose"] is True

    def test_unknown_option_exits_with_one(self, work_dir):
        assert main(["exports", "--bogus"]) == 1

    def test_version(self, capsys):
        assert main(["--version"]) == 0

        assert __version__ in capsys.readouterr().out

    def test_help(self, capsys):
        assert main(["--help"]) == 0

        assert "--destination-path" in capsys.readouterr().out

    @pytest.mark.parametrize("fmt", ["toml", "json"])
    def test_create_config(self, work_dir, exports, default_output_path, capsys, fmt):
        assert main(["--create-config", fmt]) == 0

        created = work_dir / f"pocket_cleaner.{fmt}"
        assert created.exists()
        assert f"Created configuration file: pocket_cleaner.{fmt}" in capsys.readouterr().out
        assert not default_output_path.exists()

        # The sample is picked up as the default configuration
        assert main([str(exports)]) == 0
        assert default_output_path.exists()

    def test_create_config_keeps_existing_file(self, work_dir, capsys):
        existing = work_dir / "pocket_cleaner.toml"
        existing.write_text("# mine\n")

        assert main(["--create-config", "toml"]) == 1

        assert existing.read_text() == "# mine\n"
        assert "already exists" in capsys.readouterr().err

    def test_create_config_rejects_unknown_format(self, work_dir):
        assert main(["--create-config", "yaml"]) == 1


class TestCleaningRuns:
    """Tests for complete runs."""

    def test_directory_run(self, work_dir, exports, default_output_path, capsys):
        assert main([str(exports)]) == 0

        lines = default_output_path.read_text(encoding="utf-8").splitlines()
        assert lines == [
            OUTPUT_HEADER,
            '"Example article",http://example.com/article,1700000000,true,python|reading',
            '"No tags here",https://news.site/story,1700000100,true,',
            '"<no-title>",https://blank-title.org/page,1700000200,true,misc',
            '"Fresh link",https://fresh.io,1700000400,true,new|tag with-comma',
        ]

        out = capsys.readouterr().out.splitlines()
        assert out == [
            "Loaded: 5 records…",
            "After deduplication: 4",
            "Results saved to '../output/cleaned_links.csv'",
        ]

    def test_blank_url_rows_written(self, work_dir, temp_dir, write_csv, default_output_path):
        write_csv(temp_dir / "a.csv", ["Note,,1700000000,todo", "Other note,,1700000001,"])

        assert main([str(temp_dir)]) == 0

        assert default_output_path.read_text(encoding="utf-8").splitlines() == [
            OUTPUT_HEADER,
            '"Note",,1700000000,true,todo',
        ]

    def test_single_file_run(self, work_dir, temp_dir, write_csv, default_output_path):
        path = write_csv(temp_dir / "only.csv", FIRST_EXPORT_ROWS)

        assert main([str(path)]) == 0

        assert len(default_output_path.read_text(encoding="utf-8").splitlines()) == 4

    def test_output_override(self, work_dir, exports, tmp_path, default_output_path):
        target = tmp_path / "custom" / "clean.csv"

        assert main([str(exports), "--output", str(target)]) == 0

        assert target.exists()
        assert not default_output_path.exists()

    def test_rerun_overwrites_output(self, work_dir, exports, default_output_path):
        default_output_path.parent.mkdir(parents=True)
        default_output_path.write_text("stale\n")

        assert main([str(exports)]) == 0

        assert default_output_path.read_text(encoding="utf-8").startswith(OUTPUT_HEADER)

    def test_destination_path_upserts(self, work_dir, exports, tmp_path, capsys):
        db_path = tmp_path / "pocket.db"

        assert main([str(exports), f"--destination-path={db_path}"]) == 0

        conn = sqlite3.connect(str(db_path))
        try:
            urls = [row[0] for row in conn.execute("SELECT url FROM pocket_items ORDER BY url")]
        finally:
            conn.close()

        assert urls == [
            "http://example.com/article",
            "https://blank-title.org/page",
            "https://fresh.io",
            "https://news.site/story",
        ]
        assert f"Upserted 4 records into {db_path}" in capsys.readouterr().out

    def test_verbose_prints_duplicate_summary(self, work_dir, exports, capsys):
        assert main([str(exports), "--verbose"]) == 0

        assert "Removed: 1" in capsys.readouterr().out

    def test_config_file(self, work_dir, exports, tmp_path):
        config_path = tmp_path / "settings.toml"
        target = tmp_path / "configured.csv"
        config_path.write_text(
            f'[input]\ntitle_placeholder = "untitled"\n[output]\npath = "{target.as_posix()}"\n'
        )

        assert main([str(exports), "--config", str(config_path)]) == 0

        assert '"untitled",https://blank-title.org/page' in target.read_text(encoding="utf-8")

    def test_log_file_written(self, work_dir, exports, tmp_path):
        config_path = tmp_path / "settings.toml"
        config_path.write_text('[logging]\nlevel = "INFO"\nlog_file = "cleaner.log"\n')

        assert main([str(exports), "-c", str(config_path)]) == 0

        logs = list((work_dir / "logs").glob("cleaner_*.log"))
        assert len(logs) == 1
        assert "After deduplication: 4" in logs[0].read_text(encoding="utf-8")


class TestFailures:
    """Tests for runs that stop with exit code 1."""

    def test_header_mismatch(self, work_dir, temp_dir, write_csv, default_output_path, capsys):
        write_csv(temp_dir / "a.csv", FIRST_EXPORT_ROWS)
        write_csv(temp_dir / "b.csv", SECOND_EXPORT_ROWS, header="title,url,added,tags")

        assert main([str(temp_dir)]) == 1

        err = capsys.readouterr().err
        assert "Header #0: title,url,time_added,tags" in err
        assert "Header #1: title,url,added,tags" in err
        assert not default_output_path.exists()

    def test_unsupported_input(self, work_dir, tmp_path, capsys):
        path = tmp_path / "export.txt"
        path.write_text("not a csv")

        assert main([str(path)]) == 1

        assert "Unsupported input" in capsys.readouterr().err

    def test_missing_input(self, work_dir, tmp_path, capsys):
        assert main([str(tmp_path / "nowhere")]) == 1

        assert "Unsupported input" in capsys.readouterr().err

    def test_empty_directory(self, work_dir, temp_dir, default_output_path, capsys):
        assert main([str(temp_dir)]) == 1

        assert "No CSV files found!" in capsys.readouterr().err
        assert not default_output_path.exists()

    def test_no_records(self, work_dir, temp_dir, write_csv, default_output_path, capsys):
        write_csv(temp_dir / "a.csv", ["too,few,fields"])

        assert main([str(temp_dir)]) == 1

        captured = capsys.readouterr()
        assert "Loaded: 0 records…" in captured.out
        assert "No data to process!" in captured.err
        assert not default_output_path.exists()

    def test_missing_config_file(self, work_dir, exports, tmp_path, capsys):
        assert main([str(exports), "--config", str(tmp_path / "absent.toml")]) == 1

        assert "Configuration file not found" in capsys.readouterr().err

    def test_unwritable_database(self, work_dir, exports, tmp_path, capsys):
        blocked = tmp_path / "blocked"
        blocked.mkdir()

        assert main([str(exports), "-d", str(blocked)]) == 1

        assert "Could not write to database" in capsys.readouterr().err
