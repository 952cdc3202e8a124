"""
Built-in lenses and palettes for the North Carolina 2029 housing-shortage map.

Definitions are plain dictionaries so they go through the same validation path
as lenses declared in YAML configuration.
"""

DEFAULT_PALETTE_ID = "amber_red"
DEFAULT_LENS_ID = "overview"

PALETTE_DEFINITIONS = [
    {
        "id": "amber_red",
        "description": "Total shortage: amber to deep red",
        "colors": ("#fde092ff", "#ff852eff", "#dc0a0aff", "#8c0000ff", "#430400ff"),
    },
    {
        "id": "blues",
        "description": "Per-capita shortage",
        "colors": ("#e7f2ffff", "#82b8ffff", "#1f78fdff", "#003cbfff", "#001c6aff"),
    },
    {
        "id": "purples",
        "description": "Affordable rental shortage",
        "colors": ("#e4dafbff", "#c395ffff", "#9943eaff", "#5c15d7ff", "#31027dff"),
    },
    {
        "id": "greens",
        "description": "Rental backlog",
        "colors": ("#dcffe7ff", "#80eb95ff", "#13c236ff", "#006c17ff", "#00290eff"),
    },
    {
        "id": "pinks",
        "description": "For-sale backlog",
        "colors": ("#ffe8f5ff", "#ff6bb8ff", "#e80878ff", "#980045ff", "#540034ff"),
    },
]

_POPULATION = {
    "icon": "👥",
    "label": "2029 population",
    "field": "pop2029",
    "normalizer": "number_or_zero",
    "formatter": "integer",
}
_RENTAL_GAP = {
    "icon": "🏘️",
    "label": "Rental housing shortage (units)",
    "field": "housing_gap_rentals",
    "normalizer": "number_or_zero",
    "formatter": "integer",
}
_FOR_SALE_GAP = {
    "icon": "🏡",
    "label": "For-sale housing shortage (units)",
    "field": "housing_gap_for_sale",
    "normalizer": "number_or_zero",
    "formatter": "integer",
}
_AFFORDABLE_SHARE = {
    "icon": "💡",
    "label": "Shortage of units affordable at ≤50% AMI (as % of rentals, 2029)",
    "field": "percent_rental_units_50_ami",
    "normalizer": "percent_space",
    "formatter": "percent",
}

LENS_DEFINITIONS = [
    {
        # 0-4k, 4,001-10k, 10,001-16k, 16,001-34k, 34,001+
        "id": "overview",
        "short_label": "Housing Shortage Overview",
        "metric_field": "housing_shortage",
        "value_transform": "raw",
        "classification": {"kind": "fixed", "breaks": (4000, 10000, 16000, 34000)},
        "legend_title": ("2029 housing shortage (units)",),
        "unit": "integer",
        "palette_id": "amber_red",
        "detail_fields": (
            {
                "icon": "🏠",
                "label": "Total housing shortage (units)",
                "field": "housing_shortage",
                "normalizer": "number_or_zero",
                "formatter": "integer",
            },
            _POPULATION,
            dict(_RENTAL_GAP, icon="📊"),
            _FOR_SALE_GAP,
        ),
    },
    {
        "id": "per_capita",
        "short_label": "Housing Shortage per Capita",
        "metric_field": "shortage_per_1000_2029",
        "value_transform": "raw",
        "classification": {"kind": "fixed", "breaks": (45, 57.5, 70, 82.5)},
        "legend_title": ("Shortage per 1,000 people (2029)",),
        "unit": "per_thousand",
        "palette_id": "blues",
        "detail_fields": (
            _POPULATION,
            {
                "icon": "📊",
                "label": "Shortage per 1,000 people (2029)",
                "field": "shortage_per_1000_2029",
                "normalizer": "numeric",
                "formatter": "per_thousand",
            },
            {
                "icon": "📉",
                "label": "Shortage per 1,000 households (2029)",
                "field": "shortage_per_1000_household_2029",
                "normalizer": "numeric",
                "formatter": "per_thousand",
            },
        ),
    },
    {
        # Source ratios 0.30 / 0.41 / 0.52 / 0.65, classified in percent space
        "id": "affordable_rental",
        "short_label": "Affordable Rental Unit Shortage",
        "metric_field": "percent_rental_units_50_ami",
        "value_transform": "percent",
        "classification": {"kind": "fixed", "breaks": (30, 41, 52, 65)},
        "legend_title": (
            "Shortage of rental units",
            "affordable at ≤50% AMI (percent, 2029)",
        ),
        "unit": "percent",
        "palette_id": "purples",
        "detail_fields": (_RENTAL_GAP, _AFFORDABLE_SHARE),
    },
    {
        "id": "rental_backlog",
        "short_label": "Rental Housing Backlog",
        "metric_field": "rental_gap_to_units_ratio",
        "value_transform": "percent",
        "classification": {"kind": "fixed", "breaks": (10, 15, 20, 25)},
        "legend_title": ("Rental shortage as % of rental stock (percent, 2029)",),
        "unit": "percent",
        "palette_id": "greens",
        "detail_fields": (
            _RENTAL_GAP,
            {
                "icon": "📊",
                "label": "Rental shortage as % of all rental units (2029)",
                "field": "rental_gap_to_units_ratio",
                "normalizer": "percent_space",
                "formatter": "percent",
            },
            _AFFORDABLE_SHARE,
        ),
    },
    {
        "id": "forsale_backlog",
        "short_label": "For-Sale Housing Backlog",
        "metric_field": "for_sale_gap_to_units_ratio",
        "value_transform": "percent",
        "classification": {"kind": "fixed", "breaks": (10, 13, 16, 19)},
        "legend_title": ("For-sale shortage as % of for-sale stock (percent, 2029)",),
        "unit": "percent",
        "palette_id": "pinks",
        "detail_fields": (
            _FOR_SALE_GAP,
            {
                "icon": "📊",
                "label": "For-sale shortage as % of for-sale stock (2029)",
                "field": "for_sale_gap_to_units_ratio",
                "normalizer": "percent_space",
                "formatter": "percent",
            },
        ),
    },
]

LENS_ORDER = [d["id"] for d in LENS_DEFINITIONS]
