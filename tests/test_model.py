"""
Tests for the contractmb contract model.

Tests value resolution helpers:
- Stub side vs server side values
- Regex detection
- Recursive stub-side resolution
- Identity semantics of contracts
"""

import re

from src.contractmb.contract.model import (
    Contract,
    DslValue,
    QueryParameter,
    RegexValue,
    Request,
    is_regex,
    server_side_value,
    stub_side_value,
    stub_side_values
)


class TestValueResolution:
    """Test stub/server side resolution."""

    def test_literal_is_both_sides(self):
        assert stub_side_value('abc') == 'abc'
        assert server_side_value('abc') == 'abc'

    def test_dsl_value_sides(self):
        """Test DslValue resolves to the right side."""
        value = DslValue(client=RegexValue('[0-9]+'), server='42')

        assert stub_side_value(value) == RegexValue('[0-9]+')
        assert server_side_value(value) == '42'

    def test_server_side_regex_becomes_pattern(self):
        assert server_side_value(RegexValue('a.*')) == 'a.*'
        assert server_side_value(re.compile('b+')) == 'b+'

    def test_query_parameter_server_value(self):
        parameter = QueryParameter(name='limit', value=DslValue(client=RegexValue('\\d+'), server='10'))
        assert parameter.server_value == '10'


class TestIsRegex:
    """Test regex type detection."""

    def test_regex_value(self):
        assert is_regex(RegexValue('[0-9]+'))

    def test_compiled_pattern(self):
        assert is_regex(re.compile('[a-z]+'))

    def test_literal(self):
        assert not is_regex('/users')

    def test_dsl_value_uses_stub_side(self):
        """Test only the consumer side decides."""
        assert is_regex(DslValue(client=RegexValue('.*'), server='x'))
        assert not is_regex(DslValue(client='x', server=RegexValue('.*')))


class TestStubSideValues:
    """Test recursive stub-side resolution."""

    def test_nested_structures(self):
        body = {
            'id': RegexValue('\\d+'),
            'owner': {'name': DslValue(client='stub', server='real')},
            'tags': [RegexValue('[a-z]+'), 'fixed']
        }

        assert stub_side_values(body) == {
            'id': '\\d+',
            'owner': {'name': 'stub'},
            'tags': ['[a-z]+', 'fixed']
        }

    def test_tuple_becomes_list(self):
        assert stub_side_values((1, 2)) == [1, 2]


class TestContract:
    """Test Contract identity."""

    def test_equal_contracts_are_distinct_keys(self):
        """Test two identical contracts stay separate mapping keys."""
        first = Contract(name='same', request=Request(method='GET'))
        second = Contract(name='same', request=Request(method='GET'))

        mapping = {first: 'a', second: 'b'}

        assert len(mapping) == 2
        assert first != second

    def test_display_name(self):
        assert Contract(name='get users').display_name == 'get users'
        assert Contract().display_name == 'unnamed contract'
