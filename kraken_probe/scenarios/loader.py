"""
Loading of scenario definitions from a directory of YAML feature files.
"""

from pathlib import Path

import yaml  # type: ignore[import-untyped]
from pydantic import ValidationError

from kraken_probe.api.exceptions import ConfigurationError
from kraken_probe.scenarios.schemas import Feature
from kraken_probe.utils.logger import get_logger

logger = get_logger(__name__)


def load_feature(path: Path) -> Feature:
    """
    Load and validate one feature file.

    Raises:
        ConfigurationError: If the file cannot be read, is not valid YAML or fails validation
    """
    try:
        with open(path, encoding="utf-8") as f:
            raw = yaml.safe_load(f)
        return Feature.model_validate(raw or {})
    except (OSError, UnicodeDecodeError) as e:
        logger.error("failed_to_read_feature", path=str(path), error=str(e))
        raise ConfigurationError(f"Failed to read {path}: {e}") from e
    except yaml.YAMLError as e:
        logger.error("failed_to_parse_yaml", path=str(path), error=str(e))
        raise ConfigurationError(f"Failed to parse {path}: {e}") from e
    except ValidationError as e:
        logger.error("feature_validation_failed", path=str(path), error=str(e))
        raise ConfigurationError(f"Invalid feature file {path}: {e}") from e


def load_features(directory: Path) -> list[Feature]:
    """
    Load every *.yaml / *.yml file in a directory, in file name order.

    Raises:
        ConfigurationError: If the directory is missing or holds no features
    """
    if not directory.is_dir():
        raise ConfigurationError(f"Feature directory not found: {directory}")

    paths = sorted(
        path for path in directory.iterdir() if path.suffix in (".yaml", ".yml")
    )
    if not paths:
        raise ConfigurationError(f"No feature files in {directory}")

    features = [load_feature(path) for path in paths]
    logger.info(
        "features_loaded",
        directory=str(directory),
        features=len(features),
        scenarios=sum(len(feature.scenarios) for feature in features),
    )
    return features
