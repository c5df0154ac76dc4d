"""Configuration validation utilities."""

from dataclasses import dataclass
from typing import Any

from ..data.models import Resolution

MODEL_KEYS = {"lookback", "resolution"}
CONFIG_SECTIONS = {"model"}


@dataclass(frozen=True)
class ValidationError:
    """Represents a configuration validation error."""
    field: str
    message: str
    value: Any


class ConfigValidator:
    """Validates configuration parameters."""

    @staticmethod
    def validate_model_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate signal model parameters."""
        errors = []

        if "lookback" in params:
            value = params["lookback"]
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                errors.append(ValidationError(
                    field="lookback",
                    message="Must be a positive integer",
                    value=value
                ))

        if "resolution" in params:
            value = params["resolution"]
            try:
                Resolution.parse(value)
            except ValueError:
                errors.append(ValidationError(
                    field="resolution",
                    message=f"Must be one of {', '.join(r.value for r in Resolution)}",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_config(config: dict[str, Any]) -> list[ValidationError]:
        """Validate complete configuration, rejecting unknown sections and keys."""
        errors = []

        for section in config:
            if section not in CONFIG_SECTIONS:
                errors.append(ValidationError(
                    field=str(section),
                    message=f"Unknown section; expected one of {', '.join(sorted(CONFIG_SECTIONS))}",
                    value=config[section]
                ))

        if "model" in config:
            model = config["model"]
            if not isinstance(model, dict):
                errors.append(ValidationError(
                    field="model",
                    message="Must be a mapping",
                    value=model
                ))
                return errors

            for key in model:
                if key not in MODEL_KEYS:
                    errors.append(ValidationError(
                        field=f"model.{key}",
                        message="Unknown model parameter",
                        value=model[key]
                    ))
            errors.extend(ConfigValidator.validate_model_params(model))

        return errors
