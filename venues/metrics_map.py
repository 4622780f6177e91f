from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, List

from venues.filters import FilterCriteria
from venues.parsers import format_value
from venues.records import CanonicalRecord

DEFAULT_CENTER = {"lat": 42.428, "lng": -8.644}
DEFAULT_ZOOM = 12
DEFAULT_ICON = "⭐"

TYPE_ICONS = {
    "Cafetería / Café bar": "☕",
    "Restaurante": "🍽️",
    "Espacio natural / recreativo": "🌳",
    "Alojamiento": "🏠",
    "Hotel": "🏨",
    "Actividades turísticas / deportivas": "🏄",
    "Apartamento turístico": "🏘️",
    "Área de autocaravanas": "🚐",
    "Agencia de viajes": "🧭",
    "Patrimonio arquitectónico": "🏛️",
    "Lugar religioso": "⛪",
    "Comercio": "🛍️",
    "Turismo rural": "🌾",
    "Centro cultural / museo": "🏺",
    "Instalación náutica": "⛵",
    "Mirador": "🔭",
    "Elemento histórico / artístico": "🗿",
    "Zona de especial conservación": "🦋",
    "Taller artesanal": "🧶",
    "Cascadas": "💦",
    "Evento turístico": "🎉",
    "Administración pública": "🏢",
    "Punto de información turística": "ℹ️",
    "Centro de eventos": "🎭",
    "Playa": "🏖️",
    "Transporte": "🚌",
    "Accidente geográfico": "⛰️",
    "Paseo urbano": "🚶‍♂️",
    "Otro atractivo turístico": DEFAULT_ICON,
}


def icon_for(type_: str) -> str:
    return TYPE_ICONS.get(type_, DEFAULT_ICON)


def maps_link(record: CanonicalRecord) -> str:
    if not record.has_location:
        return ""
    return f"https://www.google.com/maps?q={record.latitude},{record.longitude}"


def to_marker(record: CanonicalRecord) -> Dict[str, Any]:
    return {
        "name": record.name,
        "type": record.type,
        "icon": icon_for(record.type),
        "lat": record.latitude,
        "lng": record.longitude,
        "rating": format_value(record.rating_raw),
        "review_count": format_value(record.review_count_raw),
        "maps_url": maps_link(record),
    }


def compute_map(filters: FilterCriteria, ctx: Dict[str, Any]) -> Dict[str, Any]:
    filtered: List[CanonicalRecord] = ctx.get("filtered_records", [])
    markers = [to_marker(r) for r in filtered if r.has_location]
    return {
        "filters": asdict(filters),
        "empty": not markers,
        "center": DEFAULT_CENTER,
        "zoom": DEFAULT_ZOOM,
        "markers": markers,
        "legend": [{"type": t, "icon": i} for t, i in TYPE_ICONS.items()],
    }
