"""
Static model catalogs.

A catalog is an ordered, read-only table of ``ModelSpec`` entries for one
vendor. Clients look models up by name and reject anything not listed.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from ..exceptions import UnsupportedModelError
from ..models import ModelSpec


class ModelCatalog:
    """Ordered lookup table of the models one vendor serves."""

    def __init__(self, provider: str, models: Iterable[ModelSpec]):
        self.provider = provider
        self._models: dict[str, ModelSpec] = {}
        for spec in models:
            if spec.name in self._models:
                raise ValueError(f"Duplicate model '{spec.name}' in {provider} catalog")
            self._models[spec.name] = spec

    def __contains__(self, name: object) -> bool:
        return name in self._models

    def __iter__(self) -> Iterator[ModelSpec]:
        return iter(self._models.values())

    def __len__(self) -> int:
        return len(self._models)

    def find(self, name: str) -> ModelSpec | None:
        return self._models.get(name)

    def get_model(self, name: str) -> ModelSpec:
        """
        Look up a model by name.

        Raises:
            UnsupportedModelError: If the model is not in this catalog.
        """
        spec = self._models.get(name)
        if spec is None:
            raise UnsupportedModelError(
                f"Unsupported model type: {name}",
                provider=self.provider,
                model=name,
            )
        return spec

    def all_models(self) -> list[ModelSpec]:
        return list(self._models.values())

    def available_model_names(self) -> list[str]:
        return list(self._models)

    def models_with_capability(self, *capabilities: str) -> list[ModelSpec]:
        """Models advertising any of ``capabilities``, in catalog order."""
        return [spec for spec in self._models.values() if spec.has_capability(*capabilities)]

    def models_without_capability(
        self, include: str, *exclude: str
    ) -> list[ModelSpec]:
        """Models with ``include`` and none of ``exclude``."""
        return [
            spec for spec in self._models.values()
            if spec.has_capability(include) and not spec.has_capability(*exclude)
        ]
