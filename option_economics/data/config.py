"""YAML configuration loading."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from ..analytics.calculator import CalculatorInputs
from ..analytics.comparison import RecommendationConfig
from ..analytics.payoff import DEFAULT_SAMPLE_COUNT
from ..utils.error_handling import ConfigurationError, DataValidationError

logger = logging.getLogger("option_economics.config")

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent / "config" / "default_params.yaml"


@dataclass(frozen=True)
class CalculatorConfig:
    """Parsed configuration file."""

    inputs: CalculatorInputs
    recommendation: RecommendationConfig
    sample_count: int = DEFAULT_SAMPLE_COUNT

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> "CalculatorConfig":
        """Create CalculatorConfig from a parsed YAML document.

        Args:
            config: Mapping with optional 'inputs', 'recommendation' and
                'payoff' sections

        Returns:
            CalculatorConfig instance

        Raises:
            ConfigurationError: If a section is not a mapping, a value is
                not numeric or the option type is unknown
        """
        for section in ('inputs', 'recommendation', 'payoff'):
            value = config.get(section)
            if value is not None and not isinstance(value, dict):
                raise ConfigurationError(f"Config section '{section}' must be a mapping")

        try:
            inputs = CalculatorInputs.from_dict(config.get('inputs') or {})
            recommendation = RecommendationConfig.from_dict(config.get('recommendation') or {})
        except DataValidationError as e:
            raise ConfigurationError(str(e)) from e

        if inputs.option_type not in ('call', 'put'):
            raise ConfigurationError(f"Invalid option_type in config: {inputs.option_type}")

        sample_count = (config.get('payoff') or {}).get('sample_count', DEFAULT_SAMPLE_COUNT)
        if not isinstance(sample_count, int) or sample_count < 2:
            raise ConfigurationError(f"payoff.sample_count must be an integer >= 2, got {sample_count}")

        return cls(
            inputs=inputs,
            recommendation=recommendation,
            sample_count=sample_count,
        )


def load_config(config_path: Optional[str | Path] = None) -> CalculatorConfig:
    """Load calculator configuration from YAML.

    Args:
        config_path: Path to a YAML file. If None, loads the packaged defaults.

    Returns:
        CalculatorConfig instance

    Raises:
        FileNotFoundError: If the config file doesn't exist
        ConfigurationError: If the YAML is malformed or has invalid values
    """
    config_path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH
    if not config_path.exists():
        logger.error("Config file not found: %s", config_path)
        raise FileNotFoundError(f"Config file not found: {config_path}")

    logger.info("Loading calculator config: %s", config_path)

    try:
        with open(config_path, 'r') as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {config_path}: {e}") from e

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigurationError(f"Config root in {config_path} must be a mapping")

    return CalculatorConfig.from_dict(raw)
