import logging
import unittest
from unittest.mock import patch

import pytest

from heritage_pathfind import main
from heritage_pathfind.main import configure_logging
from heritage_pathfind.constants import NO_RELATIONSHIP_MESSAGE, USAGE_EXAMPLE
from sample_tables import FAMILY_TABLE


@pytest.fixture
def family_csv(tmp_path):
    path = tmp_path / "family.csv"
    path.write_text(FAMILY_TABLE, encoding="utf-8")
    return str(path)


@pytest.fixture(autouse=True)
def no_logging_setup():
    with patch("heritage_pathfind.main.configure_logging") as mock_configure:
        yield mock_configure


def test_prints_chain(family_csv, capsys):
    """Prints the labeled chain for a direct mother relationship."""
    assert main.main([family_csv, "1", "6"]) == 0
    assert capsys.readouterr().out == "Mother(6) is Mother of\nChild(1)\n"


def test_reciprocal_flag(family_csv, capsys):
    """--reciprocal reports the child's side of a parent edge."""
    assert main.main([family_csv, "6", "1", "--reciprocal"]) == 0
    assert capsys.readouterr().out == "Child(1) is Child of\nMother(6)\n"


def test_no_relationship_is_not_an_error(family_csv, capsys):
    """Unrelated persons print the no-relationship message and exit 0."""
    assert main.main([family_csv, "1", "7"]) == 0
    assert capsys.readouterr().out == NO_RELATIONSHIP_MESSAGE + "\n"


def test_unknown_person(family_csv, capsys, caplog):
    """An id missing from the table exits 1 and names the id."""
    assert main.main([family_csv, "1", "404"]) == 1
    assert capsys.readouterr().out == ""
    assert "404" in caplog.text


def test_missing_file(tmp_path, caplog):
    """A file that cannot be opened exits 1."""
    assert main.main([str(tmp_path / "missing.csv"), "1", "2"]) == 1
    assert "Cannot read" in caplog.text


def test_malformed_table(tmp_path, caplog):
    """A non-numeric PersonID exits 1 with the line number."""
    path = tmp_path / "bad.csv"
    path.write_text("PersonID;SpouseID;FatherID;MotherID;Person\nx;;;;Bad\n", encoding="utf-8")
    assert main.main([str(path), "1", "2"]) == 1
    assert "line 2" in caplog.text


def test_byte_order_mark_is_tolerated(tmp_path, capsys):
    """A UTF-8 byte order mark before the header is ignored."""
    path = tmp_path / "bom.csv"
    path.write_text(FAMILY_TABLE, encoding="utf-8-sig")
    assert main.main([str(path), "1", "6"]) == 0
    assert capsys.readouterr().out.startswith("Mother(6)")


def test_verbosity_is_passed_to_logging(family_csv, no_logging_setup):
    """-vv is handed to the logging setup."""
    main.main([family_csv, "1", "6", "-vv"])
    no_logging_setup.assert_called_once_with(2)


def test_undecodable_table(tmp_path, capsys, caplog):
    """Bytes that are not UTF-8 exit 1 with a parse error instead of a traceback."""
    path = tmp_path / "binary.csv"
    path.write_bytes(b"PersonID;SpouseID;FatherID;MotherID;Person\n1;;;;\xff\xfeBad\n")
    assert main.main([str(path), "1", "1"]) == 1
    assert capsys.readouterr().out == ""
    assert "not valid text" in caplog.text


def test_oversized_field(tmp_path, caplog):
    """A field the csv module refuses exits 1 with the line number."""
    path = tmp_path / "huge.csv"
    path.write_text("PersonID;SpouseID;FatherID;MotherID;Person\n1;;;;" + "x" * 200000 + "\n",
                    encoding="utf-8")
    assert main.main([str(path), "1", "1"]) == 1
    assert "line 2" in caplog.text


def test_underscored_id_is_rejected(tmp_path, caplog):
    """An id like 1_0 is not read as 10."""
    path = tmp_path / "underscore.csv"
    path.write_text("PersonID;SpouseID;FatherID;MotherID;Person\n1_0;;;;A\n", encoding="utf-8")
    assert main.main([str(path), "10", "10"]) == 1
    assert "PersonID is not an integer" in caplog.text


class TestConfigureLogging(unittest.TestCase):

    def setUp(self):
        self.root_level = logging.getLogger().level

    def tearDown(self):
        logging.getLogger().setLevel(self.root_level)

    @patch("heritage_pathfind.main.LOG_FILE", None)
    @patch("heritage_pathfind.main.LOG_LEVEL", "CRITICAL")
    def test_errors_stay_visible(self):
        with patch("logging.basicConfig") as mock_basic_config:
            configure_logging(0)
        self.assertEqual(mock_basic_config.call_args.kwargs["level"], logging.ERROR)
        self.assertEqual(logging.getLogger().level, logging.ERROR)

    @patch("heritage_pathfind.main.LOG_FILE", None)
    def test_verbose_levels(self):
        with patch("logging.basicConfig") as mock_basic_config:
            configure_logging(2)
        self.assertEqual(mock_basic_config.call_args.kwargs["level"], logging.DEBUG)


class TestUsageErrors(unittest.TestCase):

    def test_missing_arguments(self):
        with patch("sys.stderr") as mock_stderr:
            with self.assertRaises(SystemExit) as ctx:
                main.main(["family.csv", "1"])
        self.assertEqual(ctx.exception.code, 2)
        written = "".join(call.args[0] for call in mock_stderr.write.call_args_list)
        self.assertIn(USAGE_EXAMPLE, written)

    def test_non_numeric_id(self):
        with patch("sys.stderr"):
            with self.assertRaises(SystemExit) as ctx:
                main.main(["family.csv", "one", "2"])
        self.assertEqual(ctx.exception.code, 2)

    def test_multi_character_delimiter(self):
        with patch("sys.stderr") as mock_stderr:
            with self.assertRaises(SystemExit) as ctx:
                main.main(["family.csv", "1", "2", "--delimiter", ";;"])
        self.assertEqual(ctx.exception.code, 2)
        written = "".join(call.args[0] for call in mock_stderr.write.call_args_list)
        self.assertIn("single character", written)
        self.assertIn(USAGE_EXAMPLE, written)

    @patch("heritage_pathfind.main.CSV_DELIMITER", "")
    def test_invalid_delimiter_from_environment(self):
        with patch("sys.stderr"):
            with self.assertRaises(SystemExit) as ctx:
                main.main(["family.csv", "1", "2"])
        self.assertEqual(ctx.exception.code, 2)


if __name__ == '__main__':
    unittest.main()
