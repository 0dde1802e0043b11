"""Sampling parameters per provider family, and their resolution."""

from dataclasses import asdict, dataclass
from typing import Any

from sheetrag.constants import CLOUD_PROVIDER, DEFAULT_CHAT_MODELS, LOCAL_PROVIDER, PROVIDERS

PROVIDER_DEFAULTS: dict[str, dict[str, Any]] = {
    LOCAL_PROVIDER: {
        "temperature": 0.7,
        "top_p": 0.9,
        "max_tokens": 8192,
        "num_thread": 8,
        "num_gpu": 1,
        "batch_size": 512,
        "json_output": False,
    },
    CLOUD_PROVIDER: {
        "temperature": 0.7,
        "top_p": 1.0,
        "max_tokens": 4096,
    },
}

# camelCase names sent by browser clients
_ALIASES = {
    "topP": "top_p",
    "maxTokens": "max_tokens",
    "numThread": "num_thread",
    "numGpu": "num_gpu",
    "batchSize": "batch_size",
    "jsonOutput": "json_output",
}


@dataclass(frozen=True)
class ModelParameters:
    """Sampling parameters for one generation call.

    num_thread, num_gpu, batch_size and json_output only apply to the local
    provider and stay unset for the cloud one.
    """

    provider: str = LOCAL_PROVIDER
    temperature: float = 0.7
    top_p: float = 0.9
    max_tokens: int = 8192
    num_thread: int | None = None
    num_gpu: int | None = None
    batch_size: int | None = None
    json_output: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a plain dict, leaving out unset local-only knobs."""
        return {key: value for key, value in asdict(self).items() if value is not None}


def resolve_parameters(
    provider: str | None = None, overrides: dict[str, Any] | None = None
) -> ModelParameters:
    """Merge caller overrides over the defaults of a provider family.

    Args:
        provider: "local" or "cloud". If None, taken from overrides["provider"],
                  falling back to "local".
        overrides: Explicit parameter values; they take precedence over the
                   family defaults. Keys that do not apply to the family are ignored.

    Returns:
        ModelParameters: The resolved parameters

    Raises:
        ValueError: If the provider family is unknown
    """
    overrides = overrides or {}
    provider = provider or overrides.get("provider") or LOCAL_PROVIDER
    if provider not in PROVIDERS:
        raise ValueError(f"Unsupported provider: {provider}")

    values = dict(PROVIDER_DEFAULTS[provider])
    for key, value in overrides.items():
        key = _ALIASES.get(key, key)
        if key in values and value is not None:
            values[key] = value

    return ModelParameters(provider=provider, **values)


def switch_provider(provider: str) -> tuple[str, ModelParameters]:
    """Reset the model id and parameters when the provider family changes.

    Returns:
        Tuple of (default chat model id, family default parameters)
    """
    parameters = resolve_parameters(provider)
    return DEFAULT_CHAT_MODELS[provider], parameters
