import os
from dataclasses import dataclass
from typing import Any, Mapping

from .errors import ParameterValidationError


DEFAULT_SPLIT_PERCENT = 50
DEFAULT_OVERLAP_LINES = 10
MIN_SPLIT_PERCENT = 1
MAX_SPLIT_PERCENT = 100
MAX_OVERLAP_LINES = 99999

DEFAULT_BASE_URL = "https://api.anthropic.com"
DEFAULT_MODEL = "claude-sonnet-4-20250514"
DEFAULT_MAX_TOKENS = 8192
DEFAULT_TIMEOUT = 600.0
MAX_MODEL_LENGTH = 128


def parse_int_in_range(value: Any, *, name: str, minimum: int, maximum: int) -> int:
    if isinstance(value, bool):
        raise ParameterValidationError(f"{name} must be an integer")
    if isinstance(value, float) and not value.is_integer():
        raise ParameterValidationError(f"{name} must be an integer, got {value!r}")
    if isinstance(value, str):
        value = value.strip()
    try:
        parsed = int(value)
    except (TypeError, ValueError) as exc:
        raise ParameterValidationError(f"{name} must be an integer, got {value!r}") from exc
    if not minimum <= parsed <= maximum:
        raise ParameterValidationError(f"{name} must be between {minimum} and {maximum}, got {parsed}")
    return parsed


def _parse_positive_int(value: Any, *, name: str) -> int:
    try:
        parsed = int(value)
    except (TypeError, ValueError) as exc:
        raise ParameterValidationError(f"{name} must be an integer") from exc
    if parsed <= 0:
        raise ParameterValidationError(f"{name} must be > 0")
    return parsed


def _parse_positive_float(value: Any, *, name: str) -> float:
    try:
        parsed = float(value)
    except (TypeError, ValueError) as exc:
        raise ParameterValidationError(f"{name} must be a number") from exc
    if parsed <= 0:
        raise ParameterValidationError(f"{name} must be > 0")
    return parsed


def validate_model(model: str | None) -> str | None:
    if model is None:
        return None
    if not model or any(ch.isspace() for ch in model):
        raise ParameterValidationError("model must be a non-empty identifier without whitespace")
    if len(model) > MAX_MODEL_LENGTH:
        raise ParameterValidationError(f"model must be at most {MAX_MODEL_LENGTH} characters")
    return model


def validate_output_file(path: str | None) -> str | None:
    if path is None:
        return None
    if not path.strip():
        raise ParameterValidationError("output file must not be blank")
    if os.path.isdir(path):
        raise ParameterValidationError(f"output file is a directory: {path}")
    return path


@dataclass(frozen=True)
class SplitConfig:
    split_percent: int = DEFAULT_SPLIT_PERCENT
    overlap_lines: int = DEFAULT_OVERLAP_LINES

    def to_dict(self) -> dict[str, Any]:
        return {
            "split_percent": self.split_percent,
            "overlap_lines": self.overlap_lines,
        }

    @staticmethod
    def from_dict(data: Mapping[str, Any]) -> "SplitConfig":
        return SplitConfig(
            split_percent=parse_int_in_range(
                data.get("split_percent", DEFAULT_SPLIT_PERCENT),
                name="split",
                minimum=MIN_SPLIT_PERCENT,
                maximum=MAX_SPLIT_PERCENT,
            ),
            overlap_lines=parse_int_in_range(
                data.get("overlap_lines", DEFAULT_OVERLAP_LINES),
                name="overlap",
                minimum=0,
                maximum=MAX_OVERLAP_LINES,
            ),
        )


@dataclass(frozen=True)
class SummarizerConfig:
    base_url: str
    api_key: str
    model: str = DEFAULT_MODEL
    max_tokens: int = DEFAULT_MAX_TOKENS
    timeout: float = DEFAULT_TIMEOUT

    def to_dict(self) -> dict[str, Any]:
        # api_key is never serialized.
        return {
            "base_url": self.base_url,
            "model": self.model,
            "max_tokens": self.max_tokens,
            "timeout": self.timeout,
        }

    @staticmethod
    def from_env(
        model: str | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> "SummarizerConfig":
        env = os.environ if environ is None else environ
        api_key = env.get("COMPACTOR_API_KEY") or env.get("ANTHROPIC_API_KEY")
        if not api_key:
            raise ParameterValidationError("COMPACTOR_API_KEY or ANTHROPIC_API_KEY must be set")
        resolved_model = validate_model(model) or validate_model(env.get("COMPACTOR_MODEL") or None)
        max_tokens = env.get("COMPACTOR_MAX_TOKENS")
        timeout = env.get("COMPACTOR_TIMEOUT")
        return SummarizerConfig(
            base_url=(env.get("COMPACTOR_BASE_URL") or DEFAULT_BASE_URL).rstrip("/"),
            api_key=api_key,
            model=resolved_model or DEFAULT_MODEL,
            max_tokens=(
                _parse_positive_int(max_tokens, name="COMPACTOR_MAX_TOKENS")
                if max_tokens
                else DEFAULT_MAX_TOKENS
            ),
            timeout=(
                _parse_positive_float(timeout, name="COMPACTOR_TIMEOUT") if timeout else DEFAULT_TIMEOUT
            ),
        )
