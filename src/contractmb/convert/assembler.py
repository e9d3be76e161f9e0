"""
contractmb Stub Assembler

Combines predicates and responses into one Mountebank stub document per
contract and converts whole contract sets.
"""

import logging
from pathlib import Path
from typing import List, Dict, Any, Optional, Set
from dataclasses import dataclass

import yaml

from ..common import dump_document
from ..contract.model import Contract, ContractMetadata
from .normalizer import ContractStructureError, normalize_contract
from .predicates import PredicateBuilder
from .responses import ResponseBuilder
from .results import BatchResult, ConversionIssue, IssueKind, StubResult
from .schema import FILE_TYPE, OPERATION_PREDICATES, OPERATION_RESPONSES


LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')


@dataclass
class ConverterConfig:
    """Configuration for stub conversion."""

    indent: int = 2  # Pretty-print indent of stub documents
    output_suffix: str = FILE_TYPE
    strict: bool = False  # Abort the batch on contracts missing required parts
    log_level: str = "warning"
    ensure_ascii: bool = False

    def __post_init__(self):
        if str(self.log_level).upper() not in LOG_LEVELS:
            raise ValueError(
                f"Invalid log_level '{self.log_level}', expected one of: {', '.join(l.lower() for l in LOG_LEVELS)}"
            )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ConverterConfig':
        """Create config from dictionary, ignoring unknown keys."""
        defaults = cls()
        return cls(
            indent=int(data.get('indent', defaults.indent)),
            output_suffix=data.get('output_suffix', defaults.output_suffix),
            strict=bool(data.get('strict', defaults.strict)),
            log_level=data.get('log_level', defaults.log_level),
            ensure_ascii=bool(data.get('ensure_ascii', defaults.ensure_ascii))
        )

    @classmethod
    def from_yaml(cls, yaml_path: str) -> 'ConverterConfig':
        """Load config from YAML file."""
        with open(yaml_path, 'r') as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ValueError(f"Converter config {yaml_path} must be a mapping")
        return cls.from_dict(data)


class StubConverter:
    """
    Converts contracts into Mountebank stub documents.

    Example:
        converter = StubConverter()
        metadata = ContractLoader("get_users.yml").load()

        for contract, stub_json in converter.convert_contents("get_users", metadata).items():
            path = converter.generate_output_file_name(contract.name)
            Path(path).write_text(stub_json)

        # Keep the recovered issues and skipped contracts
        result = converter.convert_with_report("get_users", metadata)
        for issue in result.issues:
            print(issue.message)
    """

    def __init__(
        self,
        config: Optional[ConverterConfig] = None,
        predicate_builder: Optional[PredicateBuilder] = None,
        response_builder: Optional[ResponseBuilder] = None
    ):
        """
        Initialize converter.

        Args:
            config: Optional ConverterConfig
            predicate_builder: Optional PredicateBuilder (will create if None)
            response_builder: Optional ResponseBuilder (will create if None)
        """
        self.config = config or ConverterConfig()
        self.predicate_builder = predicate_builder or PredicateBuilder()
        self.response_builder = response_builder or ResponseBuilder()

        self.logger = logging.getLogger("contractmb.convert")
        self.logger.setLevel(getattr(logging, str(self.config.log_level).upper()))

    def convert_contents(self, root_name: str, metadata: ContractMetadata) -> Dict[Contract, str]:
        """
        Convert a contract set into stub documents.

        Contracts without a request produce no entry. Output order follows
        the input order.

        Args:
            root_name: Name of the contract source (for logging)
            metadata: Contracts to convert

        Returns:
            Ordered mapping of contract -> stub document text
        """
        return self.convert_with_report(root_name, metadata).documents

    def convert_with_report(self, root_name: str, metadata: ContractMetadata) -> BatchResult:
        """
        Convert a contract set, keeping the issues and skipped contracts.

        Raises:
            ContractStructureError: In strict mode, for the first contract
                missing a required part
        """
        result = BatchResult()
        contracts = list(metadata.converted_contracts)
        http_contracts = self._http_contracts(contracts)

        if not http_contracts:
            self.logger.debug(f"No contracts with a request in {root_name}")
            return result

        if len(contracts) == 1:
            self._convert_into(result, contracts[0])
        else:
            for contract in http_contracts:
                self._convert_into(result, contract)

        self.logger.info(
            f"Converted {len(result.documents)} of {len(contracts)} contracts from {root_name}"
        )
        return result

    def generate_output_file_name(self, input_file_name: str) -> str:
        """Stub file name for a contract file name."""
        return input_file_name + self.config.output_suffix

    def convert_contract(self, contract: Contract) -> StubResult:
        """
        Build the stub document for one contract.

        Raises:
            ContractStructureError: If the contract misses a required part
        """
        name = contract.display_name
        request, response = normalize_contract(contract)

        predicates = self.predicate_builder.build(request, contract_name=name)
        responses = self.response_builder.build(response, contract_name=name)

        document = {
            OPERATION_PREDICATES: predicates.predicates,
            OPERATION_RESPONSES: responses.responses
        }
        return StubResult(document=document, issues=predicates.issues + responses.issues)

    def convert_a_single_contract(self, contract: Contract) -> str:
        """Stub document text for one contract."""
        return self._dump(self.convert_contract(contract))

    def _dump(self, stub: StubResult) -> str:
        return dump_document(stub.document, indent=self.config.indent, ensure_ascii=self.config.ensure_ascii)

    def _convert_into(self, result: BatchResult, contract: Contract):
        try:
            stub = self.convert_contract(contract)
        except ContractStructureError as e:
            if self.config.strict:
                raise
            self.logger.warning(f"Skipping {contract.display_name}: {e}")
            result.skipped.append(contract)
            result.issues.append(ConversionIssue(
                kind=IssueKind.MISSING_STRUCTURE,
                message=str(e),
                contract=contract.display_name,
                block='contract'
            ))
            return

        result.documents[contract] = self._dump(stub)
        result.issues.extend(stub.issues)

    @staticmethod
    def _http_contracts(contracts: List[Contract]) -> List[Contract]:
        return [c for c in contracts if c.request is not None]

    def stub_file_name(self, contract: Contract) -> str:
        """Stub file name for a contract, spaces and slashes replaced."""
        return self.generate_output_file_name(self._base_name(contract))

    @staticmethod
    def _base_name(contract: Contract) -> str:
        return contract.display_name.replace(" ", "_").replace("/", "_")

    def stub_paths(
        self,
        documents: Dict[Contract, str],
        output_dir: Path,
        taken: Optional[Set[Path]] = None
    ) -> Dict[Contract, Path]:
        """
        Output path for every stub document.

        A contract whose file name is already taken (by an earlier contract
        or by a path in ``taken``) gets an ``_<n>`` suffix on its name.
        Chosen paths are added to ``taken`` so one set can be shared
        across several batches writing to the same directory.
        """
        taken = set() if taken is None else taken

        paths = {}
        for contract in documents:
            base = self._base_name(contract)
            path = output_dir / self.stub_file_name(contract)
            index = 1
            while path in taken:
                path = output_dir / self.generate_output_file_name(f"{base}_{index}")
                index += 1
            if index > 1:
                self.logger.debug(f"Stub name for {contract.display_name} taken, using {path.name}")
            taken.add(path)
            paths[contract] = path
        return paths

    def write_stubs(
        self,
        documents: Dict[Contract, str],
        output_dir: Path,
        taken: Optional[Set[Path]] = None
    ) -> List[Path]:
        """
        Write stub documents to disk, one file per contract.

        File names are the contract names (spaces and slashes replaced)
        plus the configured suffix. Clashing names are numbered, see
        stub_paths().
        """
        output_dir.mkdir(parents=True, exist_ok=True)

        written = []
        for contract, path in self.stub_paths(documents, output_dir, taken).items():
            path.write_text(documents[contract] + "\n", encoding='utf-8')
            written.append(path)
        return written
