"""YAML landing-zone configuration parser."""
import yaml
from typing import Any, Dict, Union
from pydantic import ValidationError

from .schema import Configuration
from ..errors import ConfigurationError


class ConfigParser:
    """Parser for YAML landing-zone configurations."""

    @staticmethod
    def load(file_path: str) -> Configuration:
        """Load and validate a YAML configuration file.

        Args:
            file_path: Path to the YAML configuration file.

        Returns:
            Configuration: Validated configuration object.

        Raises:
            FileNotFoundError: If the configuration file doesn't exist.
            ConfigurationError: If the file is not UTF-8, the YAML is malformed or a required field is missing.
        """
        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                text = f.read()
        except UnicodeDecodeError as e:
            raise ConfigurationError(f"{file_path} is not valid UTF-8: {e}") from e
        return ConfigParser.parse(text)

    @staticmethod
    def parse(document: Union[str, Dict[str, Any]]) -> Configuration:
        """Validate a raw YAML document or an already-decoded mapping.

        Raises:
            ConfigurationError: Naming every missing or malformed key.
        """
        if isinstance(document, str):
            try:
                data = yaml.safe_load(document)
            except yaml.YAMLError as e:
                raise ConfigurationError(f"Malformed YAML: {e}") from e
        else:
            data = document

        if data is None:
            raise ConfigurationError("Configuration document is empty")
        if not isinstance(data, dict):
            raise ConfigurationError("Configuration document must be a mapping at the top level")

        try:
            return Configuration.model_validate(data)
        except ValidationError as e:
            raise ConfigurationError(_format_errors(e)) from e


def _format_errors(error: ValidationError) -> str:
    problems = []
    for item in error.errors():
        key = ".".join(str(part) for part in item["loc"])
        if item["type"] == "missing":
            problems.append(f"missing required field '{key}'")
        elif key:
            problems.append(f"invalid field '{key}': {item['msg']}")
        else:
            problems.append(item["msg"].replace("Value error, ", ""))
    return "Invalid configuration: " + "; ".join(problems)
