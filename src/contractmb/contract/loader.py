"""
contractmb Contract Loader

Reads YAML contract files into ContractMetadata.

Custom tags:
- !regex <pattern>                              -> RegexValue
- !value {consumer: <stub>, producer: <server>} -> DslValue

Body matchers (request.matchers.body / response.matchers.body) are applied
with JSONPath before the contract is built:

    matchers:
      body:
        - path: $.id
          type: by_regex
          value: "[0-9]+"
"""

import logging
from pathlib import Path
from typing import List, Dict, Any, Optional, Iterable

import yaml
from jsonpath_ng.exceptions import JSONPathError
from jsonpath_ng.ext import parse as jsonpath_parse

from .model import (
    Contract,
    ContractMetadata,
    DslValue,
    Header,
    QueryParameter,
    RegexValue,
    Request,
    Response,
    Url
)


logger = logging.getLogger("contractmb.loader")

CONTRACT_SUFFIXES = ('.yml', '.yaml')

CLIENT_KEYS = ('consumer', 'client', 'stub')
SERVER_KEYS = ('producer', 'server', 'test')


class ContractLoadError(ValueError):
    """Raised when a contract file cannot be turned into contracts."""


class ContractYamlLoader(yaml.SafeLoader):
    """SafeLoader with the contract value tags registered."""


def _construct_regex(loader: yaml.SafeLoader, node: yaml.Node) -> RegexValue:
    return RegexValue(str(loader.construct_scalar(node)))


def _construct_value(loader: yaml.SafeLoader, node: yaml.Node) -> DslValue:
    data = loader.construct_mapping(node, deep=True)

    client = next((data[k] for k in CLIENT_KEYS if k in data), None)
    server = next((data[k] for k in SERVER_KEYS if k in data), client)
    return DslValue(client=client, server=server)


ContractYamlLoader.add_constructor('!regex', _construct_regex)
ContractYamlLoader.add_constructor('!value', _construct_value)


class ContractLoader:
    """
    Loader for YAML contract files.

    A file holds one contract per YAML document, or a list of contracts in
    a single document. Contracts without a name are named after the file.

    Example:
        metadata = ContractLoader("contracts/get_users.yml").load()

        for contract in metadata.converted_contracts:
            print(contract.name)
    """

    def __init__(self, file_path: str):
        """
        Initialize contract loader.

        Args:
            file_path: Path to a YAML contract file
        """
        self.file_path = Path(file_path)

    def load(self) -> ContractMetadata:
        """
        Load contracts from the YAML file.

        Returns:
            ContractMetadata with the contracts in file order

        Raises:
            FileNotFoundError: If the contract file doesn't exist
            ContractLoadError: If the YAML is invalid or not a contract
        """
        if not self.file_path.exists():
            raise FileNotFoundError(f"Contract file not found: {self.file_path}")

        with open(self.file_path, 'r', encoding='utf-8') as f:
            try:
                documents = list(yaml.load_all(f, Loader=ContractYamlLoader))
            except yaml.YAMLError as e:
                raise ContractLoadError(f"Invalid YAML in {self.file_path}: {e}") from e

        raw_contracts = []
        for document in documents:
            if document is None:
                continue
            if isinstance(document, list):
                raw_contracts.extend(document)
            else:
                raw_contracts.append(document)

        contracts = [
            self._contract_from_dict(data, index, len(raw_contracts))
            for index, data in enumerate(raw_contracts)
        ]
        logger.debug(f"Loaded {len(contracts)} contracts from {self.file_path}")

        return ContractMetadata(path=self.file_path, converted_contracts=contracts)

    @staticmethod
    def load_from_file(file_path: str) -> ContractMetadata:
        """
        Convenience method to load contracts in one call.

        Example:
            metadata = ContractLoader.load_from_file("get_users.yml")
        """
        loader = ContractLoader(file_path)
        return loader.load()

    @staticmethod
    def discover(paths: Iterable[str]) -> List[Path]:
        """
        Expand files and directories into the list of contract files.

        Directories are searched recursively for *.yml / *.yaml files.
        Explicit file paths are kept whatever their extension.
        """
        found = []
        for raw_path in paths:
            path = Path(raw_path)
            if path.is_dir():
                found.extend(
                    sorted(p for p in path.rglob('*') if p.is_file() and p.suffix.lower() in CONTRACT_SUFFIXES)
                )
            else:
                found.append(path)
        return found

    def _contract_from_dict(self, data: Any, index: int, total: int) -> Contract:
        """Build a Contract from one parsed YAML mapping."""
        if not isinstance(data, dict):
            raise ContractLoadError(
                f"Contract #{index} in {self.file_path} must be a mapping, "
                f"got {type(data).__name__}"
            )

        default_name = self.file_path.stem if total == 1 else f"{self.file_path.stem}_{index}"

        request_data = data.get('request')
        response_data = data.get('response')
        for section, value in (('request', request_data), ('response', response_data)):
            if value is not None and not isinstance(value, dict):
                raise ContractLoadError(f"'{section}' of contract #{index} in {self.file_path} must be a mapping")

        return Contract(
            name=str(data.get('name') or default_name),
            description=data.get('description') or '',
            request=self._parse_request(request_data) if request_data is not None else None,
            response=self._parse_response(response_data) if response_data is not None else None
        )

    def _parse_request(self, data: Dict[str, Any]) -> Request:
        query_parameters = self._parse_query_parameters(data.get('queryParameters'))

        url = None
        url_path = None
        if data.get('url') is not None:
            url = Url(value=data['url'], query_parameters=query_parameters)
        elif data.get('urlPath') is not None:
            url_path = Url(value=data['urlPath'], query_parameters=query_parameters)

        body = self._apply_body_matchers(data.get('body'), data.get('matchers'))

        return Request(
            method=data.get('method'),
            url=url,
            url_path=url_path,
            headers=self._parse_headers(data.get('headers')),
            body=body
        )

    def _parse_response(self, data: Dict[str, Any]) -> Response:
        delay = data.get('fixedDelayMilliseconds', data.get('delay'))
        body = self._apply_body_matchers(data.get('body'), data.get('matchers'))

        return Response(
            status=data.get('status'),
            headers=self._parse_headers(data.get('headers')),
            body=body,
            delay=delay
        )

    def _parse_query_parameters(self, data: Any) -> List[QueryParameter]:
        """Query parameters as a name -> value mapping, list values repeat the name."""
        if not data:
            return []
        if not isinstance(data, dict):
            raise ContractLoadError(f"queryParameters in {self.file_path} must be a mapping")

        parameters = []
        for name, value in data.items():
            values = value if isinstance(value, list) else [value]
            parameters.extend(QueryParameter(name=str(name), value=v) for v in values)
        return parameters

    def _parse_headers(self, data: Any) -> Optional[List[Header]]:
        if data is None:
            return None
        if not isinstance(data, dict):
            raise ContractLoadError(f"headers in {self.file_path} must be a mapping")

        return [Header(name=str(name), value=value) for name, value in data.items()]

    def _apply_body_matchers(self, body: Any, matchers: Optional[Dict[str, Any]]) -> Any:
        """Replace body elements selected by by_regex JSONPath matchers with RegexValues."""
        if not isinstance(matchers, dict) or not isinstance(body, (dict, list)):
            return body

        for matcher in matchers.get('body') or []:
            matcher_type = matcher.get('type', 'by_regex')
            path = matcher.get('path')

            if matcher_type == 'by_equality':
                continue
            if matcher_type != 'by_regex':
                logger.warning(f"Ignoring unsupported body matcher type '{matcher_type}' for {path}")
                continue
            if not path or matcher.get('value') is None:
                raise ContractLoadError(f"by_regex matcher in {self.file_path} needs 'path' and 'value'")

            try:
                expression = jsonpath_parse(path)
            except JSONPathError as e:
                raise ContractLoadError(f"Invalid JSONPath '{path}' in {self.file_path}: {e}") from e

            body = expression.update(body, RegexValue(str(matcher['value'])))

        return body
