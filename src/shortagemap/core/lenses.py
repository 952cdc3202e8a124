"""
Lens models and the process-wide lens registry.

A lens bundles the metric it reads, how that metric is classified, how values
are displayed and which palette colors the map. Lenses are validated once when
the registry is built; a malformed definition aborts start-up with a
``ConfigurationError`` instead of surfacing per request.
"""

import copy
from typing import (
    Annotated,
    Any,
    Dict,
    Iterable,
    List,
    Literal,
    Optional,
    Sequence,
    Tuple,
    Union,
)

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from shortagemap.config.exceptions import ConfigurationValidationError
from shortagemap.core.classifier import (
    BOUNDARY_COUNT,
    Boundaries,
    quantile_boundaries,
)
from shortagemap.core.exceptions import UnknownLensError
from shortagemap.core.palettes import Palette, PaletteResolver

UnitName = Literal["integer", "per_thousand", "percent"]
NormalizerName = Literal["number_or_zero", "numeric", "percent_space"]


class FixedClassification(BaseModel):
    """Literal breakpoints, independent of the loaded data"""

    model_config = ConfigDict(frozen=True)

    kind: Literal["fixed"] = "fixed"
    breaks: Tuple[float, ...]

    @field_validator("breaks")
    @classmethod
    def validate_breaks(cls, v):
        if not 1 <= len(v) <= BOUNDARY_COUNT:
            raise ValueError(
                f"fixed classification needs 1 to {BOUNDARY_COUNT} breaks, got {len(v)}"
            )
        if any(later < earlier for earlier, later in zip(v, v[1:])):
            raise ValueError(f"breaks must be ascending: {list(v)}")
        return v

    def boundaries(self, values=None) -> Boundaries:
        return Boundaries.from_breaks(self.breaks)

    def describe(self) -> str:
        return "fixed " + " / ".join(f"{b:g}" for b in self.breaks)


class QuantileClassification(BaseModel):
    """Equal-count breakpoints recomputed from the live value distribution"""

    model_config = ConfigDict(frozen=True)

    kind: Literal["quantile"] = "quantile"
    count: int = BOUNDARY_COUNT

    @field_validator("count")
    @classmethod
    def count_in_range(cls, v):
        if not 1 <= v <= BOUNDARY_COUNT:
            raise ValueError(f"quantile count must be between 1 and {BOUNDARY_COUNT}")
        return v

    def boundaries(self, values) -> Boundaries:
        return quantile_boundaries(values, self.count)

    def describe(self) -> str:
        return f"quantile ({self.count})"


Classification = Annotated[
    Union[FixedClassification, QuantileClassification], Field(discriminator="kind")
]


class DetailField(BaseModel):
    """One popup line: where the value comes from and how it is shown"""

    model_config = ConfigDict(frozen=True)

    icon: str = ""
    label: str
    field: str
    normalizer: NormalizerName = "numeric"
    formatter: UnitName = "integer"


class Lens(BaseModel):
    """A selectable metric with its classification and display settings"""

    model_config = ConfigDict(frozen=True)

    id: str
    short_label: str = ""
    metric_field: str
    value_transform: Literal["raw", "percent"] = "raw"
    classification: Classification
    legend_title: Tuple[str, ...]
    unit: UnitName = "integer"
    palette_id: str
    detail_fields: Tuple[DetailField, ...] = ()

    @field_validator("id", "metric_field", "palette_id")
    @classmethod
    def must_not_be_empty(cls, v):
        if not v or not v.strip():
            raise ValueError("must not be empty")
        return v.strip()

    @field_validator("legend_title", mode="before")
    @classmethod
    def split_title(cls, v):
        if isinstance(v, str):
            return (v,)
        return v

    @field_validator("legend_title")
    @classmethod
    def title_not_empty(cls, v):
        if not v:
            raise ValueError("legend_title needs at least one line")
        return v

    @property
    def is_quantile(self) -> bool:
        return self.classification.kind == "quantile"

    @property
    def label(self) -> str:
        return self.short_label or self.id


class LensRegistry:
    """
    Read-only catalog of lenses, in display order.

    Args:
        lenses: Validated lens models
        palettes: Palette resolver every lens must reference
        default_lens_id: Fallback for unknown lens ids (first lens if omitted)
        order: Display order; defaults to registration order
    """

    def __init__(
        self,
        lenses: Iterable[Lens],
        palettes: PaletteResolver,
        default_lens_id: Optional[str] = None,
        order: Optional[Sequence[str]] = None,
    ):
        self.palettes = palettes
        self._lenses: Dict[str, Lens] = {}

        problems: List[str] = []
        for lens in lenses:
            if lens.id in self._lenses:
                problems.append(f"duplicate lens id '{lens.id}'")
                continue
            if lens.palette_id not in palettes:
                problems.append(
                    f"lens '{lens.id}' references unknown palette '{lens.palette_id}'"
                )
            self._lenses[lens.id] = lens

        if not self._lenses:
            problems.append("no lenses registered")

        self._order: Tuple[str, ...] = tuple(order) if order else tuple(self._lenses)
        unknown_in_order = [lens_id for lens_id in self._order if lens_id not in self._lenses]
        if unknown_in_order:
            problems.append(f"lens order references unknown lenses {unknown_in_order}")
        missing_from_order = [lens_id for lens_id in self._lenses if lens_id not in self._order]
        if order and missing_from_order:
            problems.append(f"lens order is missing {missing_from_order}")

        if default_lens_id is None and self._order:
            default_lens_id = self._order[0]
        if default_lens_id is not None and default_lens_id not in self._lenses:
            problems.append(f"default lens '{default_lens_id}' is not registered")
        self.default_lens_id = default_lens_id

        if problems:
            raise ConfigurationValidationError(
                "Invalid lens configuration: " + "; ".join(problems)
            )

        logger.debug(
            f"Lens registry ready: {len(self._lenses)} lenses, default='{self.default_lens_id}'"
        )

    def __contains__(self, lens_id: str) -> bool:
        return lens_id in self._lenses

    def __len__(self) -> int:
        return len(self._lenses)

    def __iter__(self):
        return (self._lenses[lens_id] for lens_id in self._order)

    def list_lens_ids(self) -> Tuple[str, ...]:
        """Lens ids in the fixed display order."""
        return self._order

    def find_lens(self, lens_id: str) -> Optional[Lens]:
        return self._lenses.get(lens_id)

    def get_lens(self, lens_id: str) -> Lens:
        """Strict lookup; raises ``UnknownLensError``."""
        try:
            return self._lenses[lens_id]
        except KeyError:
            raise UnknownLensError(lens_id, self._order) from None

    def resolve_lens(self, lens_id: str) -> Lens:
        """Lenient lookup falling back to the default lens."""
        lens = self._lenses.get(lens_id)
        if lens is None:
            logger.warning(
                f"Unknown lens '{lens_id}', falling back to '{self.default_lens_id}'"
            )
            lens = self._lenses[self.default_lens_id]
        return lens

    @property
    def default_lens(self) -> Lens:
        return self._lenses[self.default_lens_id]

    @classmethod
    def from_definitions(
        cls,
        lens_definitions: Iterable[Dict[str, Any]],
        palette_definitions: Iterable[Dict[str, Any]],
        default_palette_id: str,
        default_lens_id: Optional[str] = None,
        order: Optional[Sequence[str]] = None,
    ) -> "LensRegistry":
        """Validate raw dictionaries (built-in catalog or YAML) into a registry."""
        try:
            palettes = [Palette(**definition) for definition in palette_definitions]
            lenses = [Lens(**definition) for definition in lens_definitions]
        except ValidationError as e:
            raise ConfigurationValidationError(f"Invalid lens configuration: {e}") from e
        except TypeError as e:
            raise ConfigurationValidationError(f"Malformed lens definition: {e}") from e

        try:
            resolver = PaletteResolver(palettes, default_palette_id)
        except KeyError as e:
            raise ConfigurationValidationError(str(e)) from e

        return cls(lenses, resolver, default_lens_id=default_lens_id, order=order)


def _merge_definition(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Shallow merge; nested classification blocks are replaced, not merged."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        merged[key] = copy.deepcopy(value)
    return merged


def build_registry(map_config=None) -> LensRegistry:
    """
    Build the registry from the built-in catalog plus optional map settings.

    Args:
        map_config: ``MapConfig`` with lens overrides, extra lenses and palettes

    Returns:
        Validated LensRegistry

    Raises:
        ConfigurationValidationError: on any malformed lens or palette
    """
    from shortagemap.core.catalog import (
        DEFAULT_LENS_ID,
        DEFAULT_PALETTE_ID,
        LENS_DEFINITIONS,
        LENS_ORDER,
        PALETTE_DEFINITIONS,
    )

    lens_definitions = [copy.deepcopy(d) for d in LENS_DEFINITIONS]
    palette_definitions = [copy.deepcopy(d) for d in PALETTE_DEFINITIONS]
    default_lens_id = DEFAULT_LENS_ID
    order = list(LENS_ORDER)

    if map_config is not None:
        known_palettes = {d["id"] for d in palette_definitions}
        for palette in map_config.palettes:
            if palette.get("id") in known_palettes:
                palette_definitions = [
                    d for d in palette_definitions if d["id"] != palette["id"]
                ]
            palette_definitions.append(dict(palette))

        by_id = {d["id"]: d for d in lens_definitions}
        for lens_id, override in map_config.lens_overrides.items():
            if lens_id not in by_id:
                raise ConfigurationValidationError(
                    f"Override for unknown lens '{lens_id}'"
                )
            by_id[lens_id] = _merge_definition(by_id[lens_id], override)
            logger.debug(f"Lens override applied: {lens_id} -> {sorted(override)}")

        for extra in map_config.extra_lenses:
            lens_id = extra.get("id")
            if lens_id in by_id:
                raise ConfigurationValidationError(f"duplicate lens id '{lens_id}'")
            by_id[lens_id] = dict(extra)
            order.append(lens_id)

        lens_definitions = list(by_id.values())
        if map_config.lens_order:
            order = list(map_config.lens_order)
        if map_config.default_lens:
            default_lens_id = map_config.default_lens

    return LensRegistry.from_definitions(
        lens_definitions,
        palette_definitions,
        default_palette_id=DEFAULT_PALETTE_ID,
        default_lens_id=default_lens_id,
        order=order,
    )
