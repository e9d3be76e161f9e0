"""
Tests for the contract2mountebank command-line tool.

Tests argument handling and end-to-end conversion of contract files.
"""

import json
import logging
import pytest

from src.contractmb.cli import main, parse_args, build_config


CONTRACT = """
name: get users
request:
  method: GET
  url: /users
  queryParameters:
    active: "true"
response:
  status: 200
  body:
    name: a
"""


@pytest.fixture
def contracts_dir(tmp_path):
    """Directory with one valid contract file."""
    directory = tmp_path / 'contracts'
    directory.mkdir()
    (directory / 'get_users.yml').write_text(CONTRACT)
    return directory


class TestParseArgs:
    """Test argument parsing and config building."""

    def test_defaults(self):
        args = parse_args(['contracts/'])

        assert args.inputs == ['contracts/']
        assert args.output is None
        assert args.strict is False
        assert args.dry_run is False

    def test_flags_override_config(self, tmp_path):
        config_file = tmp_path / 'converter.yml'
        config_file.write_text('indent: 4\nstrict: false\n')

        config = build_config(parse_args(['x', '--config', str(config_file), '--strict', '--indent', '1']))

        assert config.strict is True
        assert config.indent == 1


class TestMain:
    """Test end-to-end conversion."""

    def test_writes_stub_files(self, contracts_dir, tmp_path):
        output = tmp_path / 'stubs'

        exit_code = main([str(contracts_dir), '-o', str(output)])

        assert exit_code == 0
        stub = json.loads((output / 'get_users.ejs').read_text())
        assert stub['predicates'][0]['and'][0] == {
            'equals': {'path': '/users', 'method': 'GET', 'query': {'active': 'true'}}
        }
        assert stub['responses'] == [{'is': {'statusCode': '200', 'body': {'name': 'a'}}}]

    def test_default_output_next_to_contract(self, contracts_dir):
        assert main([str(contracts_dir / 'get_users.yml')]) == 0
        assert (contracts_dir / 'get_users.ejs').exists()

    def test_dry_run_writes_nothing(self, contracts_dir, tmp_path, capsys):
        output = tmp_path / 'stubs'

        exit_code = main([str(contracts_dir), '-o', str(output), '--dry-run'])

        assert exit_code == 0
        assert not output.exists()
        assert 'get_users.ejs' in capsys.readouterr().out

    def test_invalid_file_fails(self, contracts_dir, tmp_path):
        (contracts_dir / 'broken.yml').write_text('request: [unclosed\n')

        exit_code = main([str(contracts_dir), '-o', str(tmp_path / 'stubs')])

        assert exit_code == 1
        assert (tmp_path / 'stubs' / 'get_users.ejs').exists()

    def test_strict_mode_fails_on_missing_response(self, contracts_dir, tmp_path):
        (contracts_dir / 'no_response.yml').write_text(CONTRACT + '---\nrequest: {method: GET, url: /b}\n')

        assert main([str(contracts_dir), '-o', str(tmp_path / 'lenient')]) == 0
        assert main([str(contracts_dir), '-o', str(tmp_path / 'strict'), '--strict']) == 1

    def test_report(self, contracts_dir, tmp_path):
        (contracts_dir / 'bad_body.yml').write_text(
            'name: bad body\nrequest: {method: POST, url: /a, body: "oops"}\nresponse: {status: 200}\n'
        )
        report_file = tmp_path / 'report.json'

        main([str(contracts_dir), '-o', str(tmp_path / 'stubs'), '--report', str(report_file)])

        report = json.loads(report_file.read_text())
        assert report['failed_files'] == 0
        assert report['issues'][0]['kind'] == 'malformed_body_json'
        assert report['issues'][0]['contract'] == 'bad body'

    def test_no_contracts_found(self, tmp_path):
        empty = tmp_path / 'empty'
        empty.mkdir()

        assert main([str(empty)]) == 1

    def test_same_named_contracts_in_one_file(self, tmp_path):
        """Test two contracts with one name are both written."""
        contract_file = tmp_path / 'users.yml'
        contract_file.write_text(
            'name: get user\nrequest: {method: GET, url: /a}\nresponse: {status: 200}\n'
            '---\n'
            'name: get user\nrequest: {method: GET, url: /b}\nresponse: {status: 404}\n'
        )
        output = tmp_path / 'stubs'

        assert main([str(contract_file), '-o', str(output)]) == 0
        assert sorted(p.name for p in output.iterdir()) == ['get_user.ejs', 'get_user_1.ejs']

    def test_same_named_contracts_across_files(self, contracts_dir, tmp_path, capsys):
        (contracts_dir / 'more_users.yml').write_text(CONTRACT)
        output = tmp_path / 'stubs'

        assert main([str(contracts_dir), '-o', str(output), '--dry-run']) == 0
        out = capsys.readouterr().out
        assert 'get_users.ejs' in out and 'get_users_1.ejs' in out

        assert main([str(contracts_dir), '-o', str(output)]) == 0
        assert sorted(p.name for p in output.iterdir()) == ['get_users.ejs', 'get_users_1.ejs']

    def test_quiet_without_verbose(self, contracts_dir, tmp_path, caplog):
        """Test batch summaries are not logged unless -v is given."""
        with caplog.at_level(logging.INFO):
            main([str(contracts_dir), '-o', str(tmp_path / 'stubs')])

        assert 'Converted' not in caplog.text

    def test_invalid_log_level_in_config(self, contracts_dir, tmp_path, capsys):
        config_file = tmp_path / 'converter.yml'
        config_file.write_text('log_level: loud\n')

        exit_code = main([str(contracts_dir), '--config', str(config_file)])

        assert exit_code == 1
        assert 'Error loading config' in capsys.readouterr().out
